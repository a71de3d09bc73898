#!/usr/bin/env python
"""
@file casroots/ops/findroots.py
@brief Lists the root objects of the local repository that are candidates
for garbage collection, largest typed objects first.

Takes no arguments. The repository is found through $CASROOTS_PATH or the
configured default location. Progress, per-object errors and the report
are written to stdout.
"""

import datetime
import sys

from twisted.internet import defer
from twisted.internet import reactor

from casroots.core import rootsinit
from casroots.core.exception import RootsError
from casroots.data.repo import Repository, best_known_path
from casroots.roots.classifier import classify
from casroots.roots.errors import ErrorReporter
from casroots.roots.ranker import sort_object_infos
from casroots.roots.selector import gather_keys, select_roots
from casroots.util.tabwriter import TabWriter

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)

HEADER = 'Hash\tType\tSize\tPinned(recursively)\n'

class PrintingReporter(ErrorReporter):
    """
    Shows per-object failures to the operator, inline with the progress
    output.
    """

    def __init__(self, out):
        ErrorReporter.__init__(self)
        self.out = out

    def report(self, message):
        self.out.write(message + '\n')
        ErrorReporter.report(self, message)

def progress(out, message):
    out.write('%s: %s\n' % (datetime.datetime.now(), message))

def write_report(infos, out):
    w = TabWriter(out, 8, 4, 4, ' ')
    w.write(HEADER)
    for oi in infos:
        w.write('%s\t%s\t%d\t%s\n' % (oi.hash, oi.type, oi.total_size, str(oi.pinned).lower()))
    w.flush()

@defer.inlineCallbacks
def find_roots(repo, out=None, reporter=None):
    """
    @brief Full analysis run against an open repository.
    @param repo casroots.data.repo.Repository
    @param out stream for progress lines and the report
    @param reporter ErrorReporter for per-object failures
    @retval Deferred firing with the sorted list of ObjectInfo; fails with
        a RootsError on fatal errors
    """
    if out is None:
        out = sys.stdout
    if reporter is None:
        reporter = PrintingReporter(out)
    bs = repo.blockstore

    keys = yield bs.all_keys()
    pinner = yield repo.load_pinner()
    recpins = pinner.recursive_keys()

    progress(out, 'started processing keys...')
    all_keys = yield gather_keys(keys)

    progress(out, 'initial key gathering complete, now finding graph roots.')
    roots = yield select_roots(all_keys, recpins, bs.get, reporter)

    progress(out, 'root selection complete, classifying resulting objects')
    output = yield classify(roots, recpins, bs.get, reporter)

    progress(out, 'classification complete, sorting output...')
    output = sort_object_infos(output)

    failed = reporter.failed_ids()
    if failed:
        log.warning('%d of %d objects could not be fully read' % (len(failed), len(all_keys)))
    write_report(output, out)
    return output

def open_repository():
    """
    @raise RepositoryError if no repository can be located or opened
    """
    return Repository.open(best_known_path())

def run():
    """
    @retval Deferred firing with the exit status
    """
    d = defer.maybeDeferred(open_repository)
    d.addCallback(find_roots)
    d.addCallback(lambda _: 0)

    def _fatal_eb(failure):
        print(failure.getErrorMessage())
        if not failure.check(RootsError):
            failure.printTraceback(file=sys.stdout)
        return 1

    d.addErrback(_fatal_eb)
    return d

def main():
    rootsinit.configure_logging()
    status = []

    def _finish(exit_status):
        status.append(exit_status)
        reactor.stop()

    def _start():
        run().addCallback(_finish)

    reactor.callWhenRunning(_start)
    reactor.run()
    sys.exit(status[0] if status else 1)

if __name__ == '__main__':
    main()
