#!/usr/bin/env python

"""
@file casroots/core/exception.py
@brief module for exceptions

Errors derived from RootsError abort an analysis run. Per-node failures
while reading the block store are raised as
casroots.data.datastore.cas.CAStoreError and reported without stopping the
run.
"""

class RootsError(Exception):
    pass

class ConfigurationError(RootsError):
    pass

class RepositoryError(RootsError):
    """
    Repository location could not be discovered or the repository could
    not be opened.
    """

class EnumerationError(RootsError):
    """
    Listing the keys of the block store failed.
    """

class PinnerError(RootsError):
    """
    The pin set could not be loaded.
    """
