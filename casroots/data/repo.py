"""
@file casroots/data/repo.py
@brief Locating and opening an on-disk casroots repository.

A repository is a directory holding a 'datastore' directory, which is a
casroots.data.backends.fsstore.FSStore. Objects live in the '<namespace>.objs.'
key space and the pin record under '<namespace>.pins'.
"""

import os
import os.path

from twisted.internet import defer
from twisted.python.filepath import FilePath

from casroots.core import rootsconst as rc
from casroots.core import rootsinit
from casroots.core.exception import RepositoryError
from casroots.data.backends.fsstore import FSStore
from casroots.data.datastore.cas import CAStore
from casroots.data.datastore.pinner import Pinner

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)

CONF = rootsinit.config(__name__)

def best_known_path():
    """
    @brief Repository location: $CASROOTS_PATH, else the configured default.
    @raise RepositoryError if the location can not be determined
    """
    path = os.environ.get(rc.REPO_PATH_ENV)
    if not path:
        path = CONF.getValue('default_path', '~/.casroots')
    expanded = os.path.expanduser(path)
    if expanded.startswith('~'):
        raise RepositoryError('Could not expand repository path "%s": no home directory' % path)
    return os.path.abspath(expanded)


class Repository(object):
    """
    Open repository. The handle holds no OS resources beyond the paths
    themselves and stays valid for the life of the process.
    """

    def __init__(self, path, datastore, namespace):
        self.path = path
        self.namespace = namespace
        self.datastore = datastore
        self.blockstore = CAStore(datastore, namespace)

    @staticmethod
    def _datastore_path(path):
        return FilePath(path).child(CONF.getValue('datastore_dir', 'datastore'))

    @classmethod
    def open(cls, path):
        """
        @param path repository directory
        @retval Repository
        @raise RepositoryError if path is not an initialized repository
        """
        dspath = cls._datastore_path(path)
        if not dspath.isdir():
            raise RepositoryError('No casroots repository at "%s" (missing %s)' % (path, dspath.path))
        log.debug('Opened repository at "%s"' % path)
        return cls(path, FSStore(dspath), CONF.getValue('namespace', 'repo'))

    @classmethod
    def init(cls, path):
        """
        @brief Create an empty repository (or open an existing one).
        @retval Repository
        """
        dspath = cls._datastore_path(path)
        try:
            if not dspath.isdir():
                dspath.makedirs()
        except OSError as ex:
            raise RepositoryError('Could not create repository at "%s": %s' % (path, ex))
        return cls.open(path)

    def load_pinner(self):
        """
        @retval Deferred firing with the Pinner of this repository
        """
        return Pinner.load(self.datastore, self.namespace)

    @defer.inlineCallbacks
    def add(self, node, pin=False):
        """
        @brief Store node; optionally record it as a recursive pin.
        @retval Deferred firing with the ContentID of node
        """
        cid = yield self.blockstore.put(node)
        if pin:
            pinner = yield self.load_pinner()
            pinner.pin(cid, recursive=True)
            yield pinner.flush()
        return cid
