"""
@file casroots/data/datastore/pinner.py
@brief Pin set provider: which objects are marked to be kept.

The pin record is a single msgpack map stored under '<namespace>.pins' in
the backend store:
    {'recursive': [hex id, ...], 'direct': [hex id, ...]}
A repository without a pin record has no pins.
"""

import msgpack

from twisted.internet import defer

from casroots.core.cid import ContentID
from casroots.core.exception import PinnerError

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)

RECURSIVE = 'recursive'
DIRECT = 'direct'

class Pinner(object):
    """
    In-memory view of the pin record of one namespace. Changes are only
    written back by flush().
    """

    def __init__(self, backend, namespace='', recursive=(), direct=()):
        self.backend = backend
        self.namespace = namespace
        self._recursive = set(recursive)
        self._direct = set(direct)

    @staticmethod
    def pins_key(namespace):
        return namespace + '.pins'

    @classmethod
    def load(cls, backend, namespace=''):
        """
        @brief Read the pin record.
        @param backend instance providing casroots.data.store.IStore
        @retval Deferred firing with a Pinner, or failing with PinnerError
        """
        key = cls.pins_key(namespace)
        d = backend.get(key)

        def _load_cb(value):
            if value is None:
                log.debug('No pin record at "%s"' % key)
                return cls(backend, namespace)
            recursive, direct = cls._decode(value)
            log.debug('Loaded %d recursive and %d direct pins' % (len(recursive), len(direct)))
            return cls(backend, namespace, recursive, direct)

        def _get_eb(failure):
            raise PinnerError('Could not read pin record "%s": %s' % (key, failure.getErrorMessage()))

        d.addCallbacks(_load_cb, _get_eb)
        return d

    @staticmethod
    def _decode(value):
        try:
            record = msgpack.unpackb(value, raw=False)
        except (ValueError, TypeError, msgpack.exceptions.UnpackException) as ex:
            raise PinnerError('Malformed pin record: %s' % ex)
        if not isinstance(record, dict):
            raise PinnerError('Malformed pin record: not a map')
        sets = []
        for kind in (RECURSIVE, DIRECT):
            ids = record.get(kind, [])
            if not isinstance(ids, list):
                raise PinnerError('Malformed pin record: "%s" is not a list' % kind)
            try:
                sets.append(set(ContentID.from_hex(h) for h in ids))
            except (ValueError, TypeError) as ex:
                raise PinnerError('Malformed pin record: bad %s pin: %s' % (kind, ex))
        return sets

    def encode(self):
        return msgpack.packb({
            RECURSIVE: sorted(c.hex() for c in self._recursive),
            DIRECT: sorted(c.hex() for c in self._direct),
            }, use_bin_type=True)

    def recursive_keys(self):
        """
        @retval frozenset of ContentID pinned recursively
        """
        return frozenset(self._recursive)

    def direct_keys(self):
        return frozenset(self._direct)

    def pin(self, cid, recursive=True):
        if recursive:
            self._direct.discard(cid)
            self._recursive.add(cid)
        elif cid not in self._recursive:
            self._direct.add(cid)

    def unpin(self, cid):
        self._recursive.discard(cid)
        self._direct.discard(cid)

    def flush(self):
        """
        @retval Deferred for writing the pin record back to the backend
        """
        return self.backend.put(self.pins_key(self.namespace), self.encode())
