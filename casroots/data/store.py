"""
@file casroots/data/store.py
@package casroots.data.IStore key/value interface every backend provides
@package casroots.data.Store dict backed implementation of IStore
@brief Key/value storage underneath the block store. Keys are str, values
        are bytes; every operation returns a Deferred.
"""

import re

from zope.interface import Interface
from zope.interface import implementer

from twisted.internet import defer


class IStore(Interface):
    """
    Flat key/value store. Backends may complete synchronously, callers
    always receive Deferreds.
    """

    def get(key):
        """
        @retval Deferred firing with the bytes stored under key, or None
        """

    def put(key, value):
        """
        @brief Store value under key, replacing any previous value.
        """

    def query(regex):
        """
        @retval Deferred firing with the list of all regex matches found in
                the stored keys, in key order
        """

    def remove(key):
        """
        @brief Delete key; removing a missing key is not an error.
        """


def query_keys(keys, regex):
    """
    @brief Query semantics shared by the backends: every non overlapping
        match of regex in every key, keys visited in sorted order.
    """
    pattern = re.compile(regex)
    found = []
    for key in sorted(keys):
        found.extend(pattern.findall(key))
    return found


@implementer(IStore)
class Store(object):
    """
    Keeps everything in a dict. Used for tests and scratch block stores.
    """

    def __init__(self):
        self.kvs = {}

    @classmethod
    def create_store(cls):
        """
        @retval Deferred firing with a new, empty Store
        """
        return defer.succeed(cls())

    def get(self, key):
        return defer.succeed(self.kvs.get(key))

    def put(self, key, value):
        self.kvs[key] = value
        return defer.succeed(None)

    def query(self, regex):
        return defer.maybeDeferred(query_keys, list(self.kvs), regex)

    def remove(self, key):
        self.kvs.pop(key, None)
        return defer.succeed(None)
