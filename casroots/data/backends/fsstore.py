"""
@file casroots/data/backends/fsstore.py
@brief IStore implementation keeping one file per key in a directory.
"""

from zope.interface import implementer

from twisted.internet import defer
from twisted.python.filepath import FilePath

from casroots.data import store

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)


@implementer(store.IStore)
class FSStore(object):
    """
    Filesystem backend. Keys are used directly as file names below the
    store directory, so they must not contain path separators.
    """

    def __init__(self, path):
        """
        @param path directory holding the values; must exist.
        """
        if not isinstance(path, FilePath):
            path = FilePath(path)
        self.path = path

    @classmethod
    def create_store(cls, path, **kwargs):
        """
        @brief Factory method; creates the store directory if needed.
        @retval Deferred, for IStore instance.
        """
        def _create():
            fp = FilePath(path)
            if not fp.isdir():
                fp.makedirs()
            return cls(fp)
        return defer.maybeDeferred(_create)

    def _child(self, key):
        # FilePath.child raises InsecurePath for keys with separators
        return self.path.child(key)

    def _get(self, key):
        fp = self._child(key)
        if not fp.isfile():
            return None
        return fp.getContent()

    def get(self, key):
        """
        @see IStore.get
        """
        return defer.maybeDeferred(self._get, key)

    def put(self, key, value):
        """
        @see IStore.put
        """
        return defer.maybeDeferred(lambda: self._child(key).setContent(value))

    def _query(self, regex):
        keys = [fp.basename() for fp in self.path.children() if fp.isfile()]
        return store.query_keys(keys, regex)

    def query(self, regex):
        """
        @see IStore.query
        """
        return defer.maybeDeferred(self._query, regex)

    def _remove(self, key):
        fp = self._child(key)
        if fp.exists():
            fp.remove()

    def remove(self, key):
        """
        @see IStore.remove
        """
        return defer.maybeDeferred(self._remove, key)
