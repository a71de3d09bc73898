#!/usr/bin/env python

"""
@file casroots/roots/test/test_classifier.py
@test classification of root objects
"""

from twisted.internet import defer
from twisted.trial import unittest

from casroots.data.datastore import casfs
from casroots.data.datastore.cas import Blob, CAStore, CAStoreError, DagNode
from casroots.roots.classifier import ObjectInfo, classify, type_tag
from casroots.roots.errors import ErrorReporter
from casroots.roots.test.test_selector import FailingStore, FakeResolver, cid

class TypeTagTest(unittest.TestCase):

    def test_tags(self):
        self.assertEqual(type_tag(casfs.file_node(b'x').data), 'casfs-file')
        self.assertEqual(type_tag(casfs.directory_node([]).data), 'casfs-directory')
        self.assertEqual(type_tag(casfs.raw_node(b'x').data), 'casfs-raw')
        self.assertEqual(type_tag(casfs.symlink_node('t').data), 'casfs-symlink')
        self.assertEqual(type_tag(b'not casfs'), 'unknown')

    def test_custom_decoder(self):
        self.assertEqual(type_tag(b'', lambda payload: casfs.Decoded('file')), 'casfs-file')
        self.assertEqual(type_tag(b'', lambda payload: casfs.UNRECOGNIZED), 'unknown')


class ClassifyTest(unittest.TestCase):

    def setUp(self):
        self.chunk = casfs.raw_node(b'chunk data')
        self.file = casfs.file_node(b'', [self.chunk])
        self.blob = Blob(b'opaque bytes')
        # link without a recorded size
        self.sizeless = DagNode(casfs.FSNode(casfs.DIRECTORY).encode(), [('x', self.blob.id())])
        objs = [self.file, self.blob, self.sizeless]
        self.nodes = dict((o.id(), o) for o in objs)

    @defer.inlineCallbacks
    def test_classify(self):
        pins = frozenset([self.file.id()])
        infos = yield classify(self.nodes.keys(), pins, FakeResolver(self.nodes))
        by_id = dict((oi.cid, oi) for oi in infos)
        self.assertEqual(len(infos), 3)
        self.assertEqual(by_id[self.file.id()],
                ObjectInfo(self.file.id(), 'casfs-file', self.file.size(), True))
        self.assertEqual(by_id[self.blob.id()],
                ObjectInfo(self.blob.id(), 'unknown', len(self.blob.encode()), False))

    @defer.inlineCallbacks
    def test_size_failure(self):
        reporter = ErrorReporter()
        infos = yield classify([self.sizeless.id()], frozenset(), FakeResolver(self.nodes), reporter)
        self.assertEqual(infos, [ObjectInfo(self.sizeless.id(), 'casfs-directory', 0, False)])
        self.assertEqual([c for (c, _) in reporter.size_errors], [self.sizeless.id()])
        self.assertEqual(reporter.resolve_errors, [])

    @defer.inlineCallbacks
    def test_resolve_failure_still_emitted(self):
        reporter = ErrorReporter()
        missing = cid('missing')
        pins = frozenset([missing])
        infos = yield classify([missing, self.blob.id()], pins, FakeResolver(self.nodes), reporter)
        self.assertEqual(len(infos), 2)
        self.assertIn(ObjectInfo(missing, 'unknown', 0, True), infos)
        self.assertEqual(reporter.failed_ids(), set([missing]))

    @defer.inlineCallbacks
    def test_backend_read_error(self):
        backend = FailingStore(['ns.objs.' + self.file.id().hex()])
        cas = CAStore(backend, 'ns')
        for obj in (self.chunk, self.file, self.blob):
            yield cas.put(obj)
        reporter = ErrorReporter()
        pins = frozenset([self.file.id()])
        infos = yield classify([self.file.id(), self.blob.id()], pins, cas.get, reporter)
        self.assertEqual(len(infos), 2)
        self.assertIn(ObjectInfo(self.file.id(), 'unknown', 0, True), infos)
        self.assertIn(ObjectInfo(self.blob.id(), 'unknown', self.blob.size(), False), infos)
        self.assertEqual([c for (c, _) in reporter.resolve_errors], [self.file.id()])
        self.failUnless(isinstance(reporter.resolve_errors[0][1], CAStoreError))

    @defer.inlineCallbacks
    def test_decode_failure_is_unknown(self):
        node = DagNode(b'\xc1\xc1 definitely not msgpack')
        infos = yield classify([node.id()], frozenset(), FakeResolver({node.id(): node}))
        self.assertEqual(infos[0].type, 'unknown')
        self.assertEqual(infos[0].total_size, node.size())

    @defer.inlineCallbacks
    def test_empty(self):
        infos = yield classify([], frozenset(), FakeResolver({}))
        self.assertEqual(infos, [])

    def test_object_info(self):
        oi = ObjectInfo(self.blob.id(), 'unknown', 3, False)
        self.assertEqual(oi.hash, self.blob.id().hex())
        self.assertRaises(AttributeError, setattr, oi, 'pinned', True)
