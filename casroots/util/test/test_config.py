#!/usr/bin/env python

"""
@file casroots/util/test/test_config.py
@test casroots.util.config.Config and casroots.core.rootsinit
"""

import logging
import os

from twisted.trial import unittest

from casroots.core import rootsinit
from casroots.core.exception import ConfigurationError
from casroots.util.config import Config
from casroots.util.path import adjust_dir, PACKAGE_DIR

class ConfigTest(unittest.TestCase):

    def _write(self, content):
        fname = self.mktemp()
        with open(fname, 'w') as f:
            f.write(content)
        return os.path.abspath(fname)

    def test_load(self):
        fname = self._write("{'mod.a':{'key1':'value1', 'sub':{'x':1}}}")
        conf = Config(fname)
        self.assertEqual(conf['mod.a'], {'key1': 'value1', 'sub': {'x': 1}})
        self.assertEqual(conf.getValue2('mod.a', 'key1'), 'value1')
        self.assertEqual(conf.getValue2('mod.a', 'missing', 'dflt'), 'dflt')
        self.assertEqual(conf.getValue('nope', 5), 5)

    def test_subtree(self):
        fname = self._write("{'mod.a':{'key1':'value1'}}")
        conf = Config(fname)
        sub = Config('mod.a', conf)
        self.assertEqual(sub['key1'], 'value1')
        self.assertEqual(sub.getValue('key2', 'x'), 'x')
        conf.update({'mod.a': {'key2': 'live'}})
        self.assertEqual(sub['key2'], 'live')

    def test_update_from_file(self):
        base = self._write("{'mod.a':{'key1':'value1', 'keep':True}}")
        override = self._write("{'mod.a':{'key1':'local'}, 'mod.b':{'k':2}}")
        conf = Config(base)
        conf.update_from_file(override)
        conf.update_from_file(self.mktemp())
        self.assertEqual(conf.getValue2('mod.a', 'key1'), 'local')
        self.assertEqual(conf.getValue2('mod.a', 'keep'), True)
        self.assertEqual(conf.getValue2('mod.b', 'k'), 2)

    def test_no_code_execution(self):
        fname = self._write("__import__('os').getcwd()")
        self.assertRaises(ConfigurationError, Config, fname)

    def test_not_a_dict(self):
        fname = self._write("[1, 2]")
        self.assertRaises(ConfigurationError, Config, fname)

    def test_adjust_dir(self):
        self.assertEqual(adjust_dir('res/config/casroots.config'),
                os.path.join(PACKAGE_DIR, 'res', 'config', 'casroots.config'))
        self.assertEqual(adjust_dir('/abs/path'), '/abs/path')

class RootsInitTest(unittest.TestCase):

    def test_package_config(self):
        conf = rootsinit.config('casroots.data.repo')
        self.assertEqual(conf.getValue('namespace'), 'repo')
        self.assertEqual(conf.getValue('default_path'), '~/.casroots')

    def test_set_log_levels(self):
        fname = self.mktemp()
        with open(fname, 'w') as f:
            f.write("[('casroots.test.levels', 'ERROR')]")
        rootsinit.set_log_levels(os.path.abspath(fname))
        self.assertEqual(logging.getLogger('casroots.test.levels').level, logging.ERROR)

    def test_set_log_levels_missing_file(self):
        rootsinit.set_log_levels(os.path.abspath(self.mktemp()))
