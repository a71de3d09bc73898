#!/usr/bin/env python

"""
@file casroots/util/config.py
@brief Settings files holding one python literal dict, keyed by module name.

A Config is either loaded from a file or is a view on one entry of another
Config. Views read through to their parent on every access, so overrides
applied to the parent later are seen by every module holding a view.
"""

import ast
import os.path
import weakref

from casroots.core.exception import ConfigurationError
from casroots.util.path import adjust_dir

class Config(object):

    def __init__(self, cfgFile, config=None):
        """
        @param cfgFile settings file name, or the entry name when config is
            given
        @param config parent Config this one is a view on
        @raise ConfigurationError if the file is not a literal dict
        """
        assert cfgFile
        if config is None:
            self.filename = adjust_dir(cfgFile)
            self._values = _load_dict(self.filename)
            self._parent = None
        else:
            self.filename = cfgFile
            self._values = None
            self._parent = weakref.ref(config)

    def _current(self):
        if self._values is not None:
            return self._values
        parent = self._parent()
        if parent is None:
            return {}
        return parent.getValue(self.filename, {})

    def __getitem__(self, key):
        return self._current().get(key)

    def getValue(self, key, default=None):
        return self._current().get(key, default)

    def getValue2(self, key1, key2, default=None):
        """
        @brief Two level lookup, e.g. getValue2('casroots.data.repo', 'namespace')
        """
        return self.getValue(key1, {}).get(key2, default)

    def update_from_file(self, filename):
        """
        @brief Merge a settings file over this one. A missing file is ignored.
        """
        filename = adjust_dir(filename)
        if os.path.isfile(filename):
            self.update(_load_dict(filename))

    def update(self, updates):
        _merge(self._current(), updates)

def _merge(target, updates):
    # nested dicts are merged key by key, anything else replaces
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        elif isinstance(value, dict):
            target[key] = dict(value)
        else:
            target[key] = value

def _load_dict(filename):
    with open(filename) as f:
        text = f.read()
    try:
        values = ast.literal_eval(text)
    except (ValueError, SyntaxError) as ex:
        raise ConfigurationError('Could not parse settings file "%s": %s' % (filename, ex))
    if not isinstance(values, dict):
        raise ConfigurationError('Settings file "%s" does not hold a dict' % filename)
    return values
