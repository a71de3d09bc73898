#!/usr/bin/env python

"""
@file casroots/util/path.py
@brief resolves resource paths relative to the casroots package
"""

import os.path

import casroots

PACKAGE_DIR = os.path.dirname(os.path.abspath(casroots.__file__))

def adjust_dir(path):
    """
    @brief Makes relative resource paths (e.g. 'res/config/...') absolute,
        relative to the installed casroots package. Absolute paths and
        paths starting with '~' are expanded and returned unchanged otherwise.
    """
    path = os.path.expanduser(path)
    if os.path.isabs(path):
        return path
    return os.path.join(PACKAGE_DIR, path)
