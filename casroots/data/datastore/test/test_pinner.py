#!/usr/bin/env python
"""
@file casroots/data/datastore/test/test_pinner.py
@brief test loading and storing the pin record
"""

import msgpack

from twisted.internet import defer
from twisted.trial import unittest

from casroots.core.cid import ContentID
from casroots.core.exception import PinnerError
from casroots.data import store
from casroots.data.datastore.pinner import Pinner

class PinnerTest(unittest.TestCase):

    @defer.inlineCallbacks
    def setUp(self):
        self.backend = yield store.Store.create_store()
        self.a = ContentID.for_bytes(b'a')
        self.b = ContentID.for_bytes(b'b')

    @defer.inlineCallbacks
    def test_no_record(self):
        pinner = yield Pinner.load(self.backend, 'ns')
        self.assertEqual(pinner.recursive_keys(), frozenset())
        self.assertEqual(pinner.direct_keys(), frozenset())

    @defer.inlineCallbacks
    def test_pin_flush_load(self):
        pinner = yield Pinner.load(self.backend, 'ns')
        pinner.pin(self.a)
        pinner.pin(self.b, recursive=False)
        yield pinner.flush()

        loaded = yield Pinner.load(self.backend, 'ns')
        self.assertEqual(loaded.recursive_keys(), frozenset([self.a]))
        self.assertEqual(loaded.direct_keys(), frozenset([self.b]))

        other = yield Pinner.load(self.backend, 'other')
        self.assertEqual(other.recursive_keys(), frozenset())

    def test_pin_upgrades(self):
        pinner = Pinner(self.backend)
        pinner.pin(self.a, recursive=False)
        pinner.pin(self.a)
        self.assertEqual(pinner.direct_keys(), frozenset())
        self.assertEqual(pinner.recursive_keys(), frozenset([self.a]))
        # a direct pin does not downgrade a recursive one
        pinner.pin(self.a, recursive=False)
        self.assertEqual(pinner.direct_keys(), frozenset())
        pinner.unpin(self.a)
        self.assertEqual(pinner.recursive_keys(), frozenset())

    def test_recursive_keys_snapshot(self):
        pinner = Pinner(self.backend, recursive=[self.a])
        keys = pinner.recursive_keys()
        pinner.pin(self.b)
        self.assertEqual(keys, frozenset([self.a]))

    @defer.inlineCallbacks
    def test_record_format(self):
        pinner = Pinner(self.backend, 'ns', recursive=[self.a])
        yield pinner.flush()
        raw = yield self.backend.get('ns.pins')
        record = msgpack.unpackb(raw, raw=False)
        self.assertEqual(record, {'recursive': [self.a.hex()], 'direct': []})

    @defer.inlineCallbacks
    def test_malformed(self):
        for raw in (b'\xc1',
                    msgpack.packb([1]),
                    msgpack.packb({'recursive': 'abc'}),
                    msgpack.packb({'recursive': ['abc']}),
                    msgpack.packb({'recursive': [7]})):
            yield self.backend.put('ns.pins', raw)
            yield self.assertFailure(Pinner.load(self.backend, 'ns'), PinnerError)

    def test_backend_failure(self):
        def _broken(key):
            return defer.fail(IOError('disk gone'))
        self.backend.get = _broken
        return self.assertFailure(Pinner.load(self.backend, 'ns'), PinnerError)
