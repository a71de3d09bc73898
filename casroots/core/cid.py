#!/usr/bin/env python

"""
@file casroots/core/cid.py
@brief Content identifiers: the sha1 digest of an encoded store object.

A ContentID wraps the 20 byte binary digest. Its string form is the 40
char hex digest, which is also the form used for keys in the backend store.
"""

import binascii
import hashlib

DIGEST_SIZE = 20

def sha1bin(val):
    return hashlib.sha1(val).digest()

def sha1hex(val):
    return hashlib.sha1(val).hexdigest()

class ContentID(object):
    """
    Immutable, hashable and ordered name of a stored object.
    """

    __slots__ = ('_digest',)

    def __init__(self, digest):
        """
        @param digest 20 byte binary sha1 digest
        """
        if not isinstance(digest, bytes) or len(digest) != DIGEST_SIZE:
            raise ValueError('ContentID needs a %d byte digest, got %r' % (DIGEST_SIZE, digest))
        object.__setattr__(self, '_digest', digest)

    def __setattr__(self, name, value):
        raise AttributeError('ContentID is immutable')

    @classmethod
    def from_hex(cls, hexstr):
        """
        @brief Parse the 40 char hex form.
        @retval ContentID
        @raise ValueError on malformed input
        """
        if len(hexstr) != DIGEST_SIZE * 2:
            raise ValueError('ContentID hex form must be %d chars: %r' % (DIGEST_SIZE * 2, hexstr))
        try:
            return cls(binascii.unhexlify(hexstr))
        except (binascii.Error, TypeError) as ex:
            raise ValueError('invalid ContentID hex %r: %s' % (hexstr, ex))

    @classmethod
    def for_bytes(cls, encoded):
        """
        @brief The id of an object is the hash of its full encoding.
        """
        return cls(sha1bin(encoded))

    @property
    def digest(self):
        return self._digest

    def hex(self):
        return binascii.hexlify(self._digest).decode('ascii')

    def __str__(self):
        return self.hex()

    def __repr__(self):
        return 'ContentID(%s)' % self.hex()

    def __eq__(self, other):
        if not isinstance(other, ContentID):
            return NotImplemented
        return self._digest == other._digest

    def __ne__(self, other):
        if not isinstance(other, ContentID):
            return NotImplemented
        return self._digest != other._digest

    def __lt__(self, other):
        if not isinstance(other, ContentID):
            return NotImplemented
        return self._digest < other._digest

    def __le__(self, other):
        if not isinstance(other, ContentID):
            return NotImplemented
        return self._digest <= other._digest

    def __gt__(self, other):
        if not isinstance(other, ContentID):
            return NotImplemented
        return self._digest > other._digest

    def __ge__(self, other):
        if not isinstance(other, ContentID):
            return NotImplemented
        return self._digest >= other._digest

    def __hash__(self):
        return hash(self._digest)
