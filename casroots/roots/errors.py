"""
@file casroots/roots/errors.py
@brief Collects per-object failures of an analysis run. None of them stop
the run; every failure is reported to the operator.
"""

import casroots.util.rootslog
log = casroots.util.rootslog.getLogger(__name__)

class ErrorReporter(object):
    """
    Default reporter: remembers every failure and logs it. Command line
    tools override report() to show failures to the operator.
    """

    def __init__(self):
        self.resolve_errors = []
        self.size_errors = []

    def resolve_failed(self, cid, ex):
        """
        @brief An object could not be read or decoded from the block store.
        """
        self.resolve_errors.append((cid, ex))
        self.report('error reading dag node (%s): %s' % (cid, ex))

    def size_failed(self, cid, ex):
        self.size_errors.append((cid, ex))
        self.report('error getting size of object: %s' % ex)

    def report(self, message):
        log.warning(message)

    def failed_ids(self):
        return set(cid for (cid, _) in self.resolve_errors + self.size_errors)
