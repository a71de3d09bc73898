"""
@file casroots/roots/selector.py
@brief Root selection: which stored objects are not linked from elsewhere.

Starting from every stored id, each stored object is resolved once and all
of its children that are not recursive pin roots themselves are removed
from the candidate set. Whether the parent is pinned is not consulted, so
this is a coarser filter than reachability from the pin roots.

Objects that can not be resolved stay candidates and demote nothing.
"""

from twisted.internet import defer

from casroots.data.datastore.cas import CAStoreError
from casroots.roots.errors import ErrorReporter

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)

def gather_keys(feed):
    """
    @brief Drain a store enumeration feed.
    @param feed casroots.data.datastore.cas.KeyFeed
    @retval Deferred firing with the set of all stored ContentIDs
    """
    return feed.drain()

@defer.inlineCallbacks
def select_roots(keys, recpins, resolve, reporter=None):
    """
    @param keys all stored ContentIDs
    @param recpins set of recursively pinned ContentIDs
    @param resolve callable mapping a ContentID to a node (or a Deferred for
        one); raises CAStoreError if the node can not be read
    @param reporter ErrorReporter receiving resolve failures
    @retval Deferred firing with the set of root ContentIDs, a subset of keys
    """
    if reporter is None:
        reporter = ErrorReporter()

    # iterate a frozen snapshot; roots shrinks while we go
    snapshot = sorted(frozenset(keys))
    roots = set(snapshot)
    removed = 0
    for c in snapshot:
        try:
            nd = yield defer.maybeDeferred(resolve, c)
        except CAStoreError as ex:
            reporter.resolve_failed(c, ex)
            continue

        for lnk in nd.links():
            if lnk.id not in recpins:
                if lnk.id in roots:
                    removed += 1
                roots.discard(lnk.id)

    log.debug('Root selection kept %d of %d objects (%d demoted)' % (len(roots), len(snapshot), removed))
    return roots
