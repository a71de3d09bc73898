"""
@file casroots/data/datastore/cas.py
@brief Content addressable store of immutable nodes.

There are two kinds of storage objects: unstructured data nodes (blob) and
structured nodes (node), which carry an opaque payload and an ordered list
of links to other stored objects. The structure is that of the ca store
format; what the payload means (e.g. a casfs file system node) is decided
by higher layers.

Every object is encoded as
    [type][space][content-length][null-char][body]
and stored under the hex sha1 of that encoding, so the key of an object is
always derived from its content. Reading an object back verifies this.

@note Every store call returns a twisted.internet.defer.Deferred, as
casroots.data.store.IStore specifies.
"""

import re

from twisted.internet import defer
from twisted.internet import task

from zope.interface import Interface
from zope.interface import Attribute
from zope.interface import implementer

from casroots.core.cid import ContentID, DIGEST_SIZE
from casroots.core.exception import EnumerationError

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)

NULL_CHR = b'\x00'
NO_SIZE = b'-'

class CAStoreError(Exception):
    """
    Exception class for CAStore. Raised for objects that are missing,
    corrupt or otherwise unreadable.
    """

class Link(tuple):
    """
    Represents a child link of a structured node. Not an object itself, but
    a convenience container for the format of an element of a node. A
    tuple is immutable, so this is a safe way to carry around the links
    of a node.
    """

    def __new__(cls, name, obj, size=None):
        """
        @param name something to associate with obj
        @param obj a storable object or its ContentID
        @param size cumulative size of the linked subtree, None if unknown.
            Taken from obj when obj is a storable object.
        """
        if isinstance(obj, BaseNode):
            if size is None:
                size = obj.size()
            obj = obj.id()
        if not isinstance(obj, ContentID):
            raise TypeError('link target must be a node or ContentID, got %r' % (obj,))
        if size is not None and size < 0:
            raise ValueError('link size may not be negative: %r' % size)
        if isinstance(name, bytes):
            name = name.decode('utf-8')
        if '\x00' in name:
            raise ValueError('link name may not contain null characters: %r' % name)
        return tuple.__new__(cls, (name, obj, size))

    @property
    def name(self):
        return self[0]

    @property
    def id(self):
        return self[1]

    @property
    def size(self):
        return self[2]

    def __str__(self):
        return 'name:"%s" id:"%s" size:"%s"' % (self[0], self[1], self[2])


class ICAStoreNode(Interface):
    """
    Interface of immutable content objects stored in CAStore.
    """

    type = Attribute("""@param type Type of storable object. This should be
            set as a class attribute for each type implementation class""")

    data = Attribute("""@param data payload bytes of the object""")

    def encode():
        """
        @brief Full encoding (header + body) of storable content.
        @retval Storable, hashable bytes representing an object.
        """

    def links():
        """
        @brief Ordered list of Link to child objects.
        """

    def size():
        """
        @brief Length of the encoding plus the recorded size of all linked
        subtrees.
        @raise CAStoreError if a link has no recorded size
        """


@implementer(ICAStoreNode)
class BaseNode(object):
    """Base object of content addressable value store
    Instances of these objects are immutable.
    """

    type = None
    _encoded_cache = None

    @property
    def value(self):
        """
        @brief Bytes that actually go into the store (i.e. content
        addressable key/value store).
        """
        return self.encode()

    def encode(self):
        if self._encoded_cache is None:
            body = self._encode_body()
            header = self._encode_header(body)
            self._encoded_cache = header + body
        return self._encoded_cache

    def id(self):
        return ContentID.for_bytes(self.encode())

    def links(self):
        return []

    def size(self):
        total = len(self.encode())
        for link in self.links():
            if link.size is None:
                raise CAStoreError('link "%s" (%s) has no recorded size' % (link.name, link.id))
            total += link.size
        return total

    @staticmethod
    def decode(value, types):
        """
        @brief Decode an encoded object. This is a general entry-point
        that starts off the decoding process using the definitive
        _decode_header implementation. Once the header is decoded, the type
        name is known and the actual type (class) is retrieved from the
        provided types dict, to which the rest of the decoding is delegated.
        @param value An encoded storable object.
        @param types A dictionary of type_name:type_class where type_class
        is a derived class of BaseNode (Blob, DagNode).
        @retval A new instance of the encoded object
        """
        type, body = BaseNode._decode_header(value)
        if type not in types:
            raise CAStoreError('Unknown object type "%s"' % type)
        return types[type]._decode_body(body)

    @classmethod
    def decode_full(cls, encoded_obj):
        """
        @brief Decode a known object type.
        """
        type, body = BaseNode._decode_header(encoded_obj)
        if type != cls.type:
            raise CAStoreError('Expected object type "%s", got "%s"' % (cls.type, type))
        return cls._decode_body(body)

    def _encode_header(self, body):
        """
        @brief method all derived classes use this to compute header.
        @note Header format:
            [type][space][content-length][null-char]
        """
        return b'%s %d' % (self.type.encode('ascii'), len(body)) + NULL_CHR

    @staticmethod
    def _decode_header(encoded_obj):
        """
        @brief extract the header from an encoded value
        """
        sep_index = encoded_obj.find(NULL_CHR)
        if sep_index < 0:
            raise CAStoreError('Object header is not terminated')
        head = encoded_obj[:sep_index]
        body = encoded_obj[sep_index + 1:]
        try:
            type, content_length = head.split()
            type = type.decode('ascii')
            content_length = int(content_length)
        except ValueError:
            raise CAStoreError('Malformed object header: %r' % head)
        if len(body) != content_length:
            raise CAStoreError('Object body is %d bytes, header says %d' % (len(body), content_length))
        return type, body

    def _encode_body(self):
        raise NotImplementedError

    @classmethod
    def _decode_body(cls, encoded_body):
        raise NotImplementedError


class Blob(BaseNode):
    """
    Blob is a container for blob of bytes (string, or serialized object).
    """
    type = 'blob'

    def __init__(self, content):
        """
        @param content bytes
        @note once content is set, it should not change
        """
        self.content = content

    @property
    def data(self):
        return self.content

    def _encode_body(self):
        return self.content

    def __str__(self):
        head = '=' * 10
        strng = """\n%s Store Type: %s %s\n""" % (head, self.type, head,)
        strng += """= Key: "%s"\n""" % self.id()
        strng += """= Content: %r\n""" % self.content
        strng += head * 2
        return strng

    @classmethod
    def _decode_body(cls, encoded_body):
        return cls(encoded_body)


class DagNode(BaseNode):
    """
    Structured node: an opaque payload plus ordered links to other objects.
    """
    type = 'node'

    def __init__(self, data=b'', links=()):
        """
        @param data payload bytes
        @param links sequence of Link, or (name, obj[, size]) tuples
        """
        children = []
        for child in links:
            if not isinstance(child, Link):
                child = Link(*child)
            children.append(child)
        self._links = children
        self.data = data

    def links(self):
        return list(self._links)

    def _encode_body(self):
        """
        format of the body of a structured node
        [link-count][\n]
        per link: [size or -][space][name][null char][20 byte digest]
        [payload]
        """
        parts = [b'%d\n' % len(self._links)]
        for (name, cid, size) in self._links:
            if size is None:
                parts.append(NO_SIZE)
            else:
                parts.append(b'%d' % size)
            parts.append(b' ' + name.encode('utf-8') + NULL_CHR + cid.digest)
        parts.append(self.data)
        return b''.join(parts)

    def __str__(self):
        head = '=' * 10
        strng = """\n%s Store Type: %s %s\n""" % (head, self.type, head,)
        strng += """= Key: "%s"\n""" % self.id()
        for link in self._links:
            strng += """= name: "%s", id: "%s"\n""" % (link.name, link.id)
        strng += head * 2
        return strng

    @classmethod
    def _decode_body(cls, encoded_body):
        """
        @brief Parse encoded structured node.
        @retval New instance of DagNode.
        """
        nl = encoded_body.find(b'\n')
        if nl < 0:
            raise CAStoreError('Node body has no link count')
        try:
            count = int(encoded_body[:nl])
        except ValueError:
            raise CAStoreError('Malformed link count in node body')
        pos = nl + 1
        links = []
        for _ in range(count):
            nul = encoded_body.find(NULL_CHR, pos)
            if nul < 0:
                raise CAStoreError('Truncated link %d in node body' % len(links))
            size_name = encoded_body[pos:nul]
            digest = encoded_body[nul + 1:nul + 1 + DIGEST_SIZE]
            if len(digest) != DIGEST_SIZE:
                raise CAStoreError('Truncated link digest in node body')
            try:
                size, name = size_name.split(b' ', 1)
                size = None if size == NO_SIZE else int(size)
                name = name.decode('utf-8')
            except ValueError:
                raise CAStoreError('Malformed link %r in node body' % size_name)
            if size is not None and size < 0:
                raise CAStoreError('Malformed link %r in node body: negative size' % size_name)
            links.append(Link(name, ContentID(digest), size))
            pos = nul + 1 + DIGEST_SIZE
        return cls(encoded_body[pos:], links)


class ICAStore(Interface):
    """
    @brief Content addressable value store. Stores ICAStoreNode instances
    in a persistent storage via an object providing casroots.data.store.IStore.
    """

    TYPES = Attribute("""@param TYPES Dict providing map of ICAStoreNode
        type names to ICAStoreNode content object implementation class.""")

    def get(id):
        """
        @param id ContentID of content object.
        @retval defer.Deferred that fires with an object that provides
        ICAStoreNode, or fails with CAStoreError.
        """

    def put(obj):
        """
        @brief The key the object is stored at is determined by taking the
        hash of the content.
        @param obj instance of object providing ICAStoreNode
        @retval defer.Deferred that fires with the obj ContentID.
        """

    def all_keys():
        """
        @retval defer.Deferred that fires with a KeyFeed of every stored
        ContentID.
        """


class StoreContextWrapper(object):
    """
    Context wrapper around backend store.
    """

    def __init__(self, backend, prefix):
        """
        @param backend instance that provides casroots.data.store.IStore
        interface.
        @param prefix segment of namespace (the context).
        """
        self.backend = backend
        self.prefix = prefix

    def _key(self, id):
        return self.prefix + id

    def get(self, id):
        return self.backend.get(self._key(id))

    def put(self, id, val):
        return self.backend.put(self._key(id), val)

    def query(self, regex):
        pattern = "^%s%s" % (re.escape(self.prefix), regex,)
        return self.backend.query(pattern)


class KeyFeed(object):
    """
    Stream of stored ContentIDs, filled in the background by a cooperative
    task. Consumers pull with get() until it fires with None.
    """

    def __init__(self):
        self._queue = defer.DeferredQueue()
        self.done = None

    def start(self, keys):
        self.done = task.coiterate(self._fill(keys))
        return self

    def _fill(self, keys):
        try:
            for key in keys:
                self._queue.put(key)
                yield None
        finally:
            self._queue.put(None)

    def get(self):
        """
        @retval Deferred firing with the next ContentID, or None once the
        feed is exhausted.
        """
        return self._queue.get()

    @defer.inlineCallbacks
    def drain(self):
        """
        @retval Deferred firing with the set of all remaining ContentIDs.
        """
        keys = set()
        while True:
            c = yield self.get()
            if c is None:
                break
            keys.add(c)
        return keys


@implementer(ICAStore)
class CAStore(object):
    """
    Content Addressable Store
    """

    TYPES = {
            Blob.type: Blob,
            DagNode.type: DagNode,
            }

    def __init__(self, backend, namespace=''):
        """
        @param backend instance that provides the casroots.data.store.IStore
        interface.
        @param namespace root prefix qualifying context for this CAS with in the
        general space of the backend store.
        """
        self.backend = backend
        self.namespace = namespace
        self.objs = StoreContextWrapper(backend, namespace + '.objs.')

    def decode(self, encoded_obj):
        """
        @brief decode raw object read from backend store
        @param encoded_obj encoded object of one of the type in self.TYPES
        """
        return BaseNode.decode(encoded_obj, self.TYPES)

    def put(self, obj):
        """
        @param obj storable object
        @retval Deferred firing with the ContentID of obj
        """
        data = obj.encode()
        id = ContentID.for_bytes(data)
        d = self.objs.put(id.hex(), data)
        d.addCallback(lambda _: id)
        return d

    def get(self, id):
        """
        @param id ContentID (or its hex form) of a stored object
        @retval Deferred firing with the decoded object
        """
        if not isinstance(id, ContentID):
            id = ContentID.from_hex(id)
        d = defer.maybeDeferred(self.objs.get, id.hex())
        def _decode_cb(data):
            if data is None:
                raise CAStoreError("Object with id: %s not found" % id)
            # assure integrity
            if ContentID.for_bytes(data) != id:
                raise CAStoreError("Object Integrity Error! (%s)" % id)
            return self.decode(data)
        def _read_eb(failure):
            raise CAStoreError("error reading %s: %s" % (id, failure.getErrorMessage()))
        d.addCallbacks(_decode_cb, _read_eb)
        return d

    def all_keys(self):
        """
        @brief Enumerate every object in the store. Backend keys below the
        objects namespace that are not valid ids are logged and skipped.
        @retval Deferred firing with a started KeyFeed
        @raise EnumerationError (via the Deferred) if the backend can not
        be queried
        """
        prefix = self.objs.prefix
        d = self.objs.query('.*')

        def _keys_cb(matches):
            keys = []
            for key in matches:
                try:
                    keys.append(ContentID.from_hex(key[len(prefix):]))
                except ValueError:
                    log.warning('Skipping malformed object key "%s"' % key)
            log.debug('Enumerating %d object keys' % len(keys))
            return KeyFeed().start(keys)

        def _query_eb(failure):
            raise EnumerationError('Could not list object keys of "%s": %s'
                    % (self.namespace, failure.getErrorMessage()))

        d.addCallbacks(_keys_cb, _query_eb)
        return d
