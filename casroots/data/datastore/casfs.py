"""
@file casroots/data/datastore/casfs.py
@brief Typed file system node descriptions carried in node payloads.

A casfs payload is a msgpack map
    {'Type': int, 'Data': bytes, 'filesize': int or None, 'blocksizes': [int]}
Decoding is only used to label objects; payloads that are not casfs
descriptions are reported as UNRECOGNIZED rather than raising.
"""

import collections

import msgpack

from casroots.core import rootsinit
from casroots.data.datastore.cas import DagNode, Link

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)

CONF = rootsinit.config(__name__)

TYPE_PREFIX = CONF.getValue('type_prefix', 'casfs')

RAW = 0
DIRECTORY = 1
FILE = 2
METADATA = 3
SYMLINK = 4

TYPE_NAMES = {
    RAW: 'raw',
    DIRECTORY: 'directory',
    FILE: 'file',
    METADATA: 'metadata',
    SYMLINK: 'symlink',
}

class FSNode(object):
    """
    File system node description.
    """

    def __init__(self, type, data=b'', filesize=None, blocksizes=()):
        if type not in TYPE_NAMES:
            raise ValueError('Unknown casfs node type %r' % (type,))
        self.type = type
        self.data = data
        self.filesize = filesize
        self.blocksizes = list(blocksizes)

    @property
    def type_name(self):
        return TYPE_NAMES[self.type]

    def file_size(self):
        if self.filesize is not None:
            return self.filesize
        return len(self.data) + sum(self.blocksizes)

    def encode(self):
        return msgpack.packb({
            'Type': self.type,
            'Data': self.data,
            'filesize': self.filesize,
            'blocksizes': self.blocksizes,
            }, use_bin_type=True)

    @classmethod
    def from_bytes(cls, payload):
        """
        @brief Strict parse of a casfs payload.
        @raise ValueError if payload is not a casfs node description
        """
        try:
            obj = msgpack.unpackb(payload, raw=False)
        except (ValueError, TypeError, msgpack.exceptions.UnpackException) as ex:
            raise ValueError('payload is not msgpack: %s' % ex)
        if not isinstance(obj, dict):
            raise ValueError('payload is not a map')
        type = obj.get('Type')
        if not isinstance(type, int) or isinstance(type, bool) or type not in TYPE_NAMES:
            raise ValueError('payload has no known casfs Type: %r' % (type,))
        data = obj.get('Data', b'')
        filesize = obj.get('filesize')
        blocksizes = obj.get('blocksizes', [])
        if not isinstance(data, bytes):
            raise ValueError('casfs Data must be bytes')
        if filesize is not None and not isinstance(filesize, int):
            raise ValueError('casfs filesize must be an integer')
        if not isinstance(blocksizes, list):
            raise ValueError('casfs blocksizes must be a list')
        return cls(type, data, filesize, blocksizes)


Decoded = collections.namedtuple('Decoded', ['type_name'])

class _Unrecognized(object):

    def __repr__(self):
        return 'UNRECOGNIZED'

UNRECOGNIZED = _Unrecognized()

def decode(payload):
    """
    @brief Interpret a payload as a casfs node.
    @retval Decoded(type_name) or UNRECOGNIZED
    """
    try:
        fsn = FSNode.from_bytes(payload)
    except ValueError as ex:
        log.debug('Payload not recognized as casfs: %s' % ex)
        return UNRECOGNIZED
    return Decoded(fsn.type_name)


def file_node(content, chunks=()):
    """
    @brief Build a file node. Content is inlined; chunks are nodes holding
    further parts of the file.
    """
    chunks = list(chunks)
    sizes = []
    for chunk in chunks:
        fsn = FSNode.from_bytes(chunk.data)
        sizes.append(fsn.file_size())
    fsn = FSNode(FILE, content, len(content) + sum(sizes), sizes)
    return DagNode(fsn.encode(), [Link('', chunk) for chunk in chunks])

def raw_node(content):
    return DagNode(FSNode(RAW, content, len(content)).encode())

def directory_node(entries):
    """
    @param entries sequence of (name, node) pairs
    """
    return DagNode(FSNode(DIRECTORY).encode(), [Link(name, obj) for (name, obj) in entries])

def symlink_node(target):
    if not isinstance(target, bytes):
        target = target.encode('utf-8')
    return DagNode(FSNode(SYMLINK, target).encode())

def metadata_node(mimetype, obj):
    return DagNode(FSNode(METADATA, mimetype.encode('utf-8')).encode(), [Link('', obj)])
