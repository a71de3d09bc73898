"""
@file casroots/roots/classifier.py
@brief Labels root objects with their type, total size and pin status.
"""

import collections

from twisted.internet import defer

from casroots.core.rootsconst import UNKNOWN_TYPE
from casroots.data.datastore import casfs
from casroots.data.datastore.cas import CAStoreError
from casroots.roots.errors import ErrorReporter

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)

class ObjectInfo(collections.namedtuple('ObjectInfo', ['cid', 'type', 'total_size', 'pinned'])):
    """
    One row of the roots report.
    @param cid ContentID
    @param type type tag, e.g. 'casfs-file', or 'unknown'
    @param total_size size of the object including linked subtrees
    @param pinned True if the object is itself a recursive pin root
    """
    __slots__ = ()

    @property
    def hash(self):
        return str(self.cid)

def type_tag(payload, decode=casfs.decode):
    """
    @retval '<prefix>-<type name>' for casfs payloads, 'unknown' otherwise
    """
    result = decode(payload)
    if result is casfs.UNRECOGNIZED:
        return UNKNOWN_TYPE
    return '%s-%s' % (casfs.TYPE_PREFIX, result.type_name)

@defer.inlineCallbacks
def classify(roots, recpins, resolve, reporter=None, decode=casfs.decode):
    """
    @param roots ContentIDs to classify
    @param recpins set of recursively pinned ContentIDs
    @param resolve callable mapping a ContentID to a node (or a Deferred for
        one); raises CAStoreError if the node can not be read
    @param reporter ErrorReporter receiving resolve and size failures
    @param decode payload decoder returning casfs.Decoded or casfs.UNRECOGNIZED
    @retval Deferred firing with a list of ObjectInfo, one per root
    """
    if reporter is None:
        reporter = ErrorReporter()

    output = []
    for c in sorted(roots):
        pinned = c in recpins
        try:
            nd = yield defer.maybeDeferred(resolve, c)
        except CAStoreError as ex:
            reporter.resolve_failed(c, ex)
            output.append(ObjectInfo(c, UNKNOWN_TYPE, 0, pinned))
            continue

        size = 0
        try:
            size = nd.size()
        except CAStoreError as ex:
            reporter.size_failed(c, ex)

        output.append(ObjectInfo(c, type_tag(nd.data, decode), size, pinned))

    log.debug('Classified %d objects' % len(output))
    return output
