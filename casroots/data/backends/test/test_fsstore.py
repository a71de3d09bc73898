#!/usr/bin/env python

"""
@file casroots/data/backends/test/test_fsstore.py
@test casroots.data.backends.fsstore.FSStore against the IStore tests
"""

from twisted.internet import defer
from twisted.python.filepath import FilePath, InsecurePath

from casroots.data.backends.fsstore import FSStore
from casroots.data.test.test_store import IStoreTest

class FSStoreTest(IStoreTest):

    def _setup_backend(self):
        self.path = self.mktemp()
        return FSStore.create_store(self.path)

    @defer.inlineCallbacks
    def test_persistent(self):
        yield self.ds.put(self.key, self.value)
        other = FSStore(self.path)
        b = yield other.get(self.key)
        self.failUnlessEqual(b, self.value)
        self.failUnless(FilePath(self.path).child(self.key).isfile())

    @defer.inlineCallbacks
    def test_query_ignores_directories(self):
        FilePath(self.path).child('ns.objs.dir').makedirs()
        yield self.ds.put('ns.objs.aa', b'1')
        keys = yield self.ds.query(r'^ns\.objs\..*')
        self.failUnlessEqual(keys, ['ns.objs.aa'])

    def test_insecure_key(self):
        d = self.ds.put('../escape', b'x')
        return self.assertFailure(d, InsecurePath)
