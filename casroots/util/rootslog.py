#!/usr/bin/env python

"""
@file casroots/util/rootslog.py
@brief Logger access for all casroots modules.

Modules obtain their logger once at import time:
    import casroots.util.rootslog
    log = casroots.util.rootslog.getLogger(__name__)
Handlers registered with the module level log_factory are attached to every
logger handed out afterwards, e.g. to capture output in tests.
"""
import logging

class LogFactory(object):

    def __init__(self):
        self._handlers = []
        self._loggers = {}

    def get_logger(self, loggername):
        logger = logging.getLogger(loggername)
        self._loggers[loggername] = logger
        self._attach(logger)
        return logger

    def _attach(self, logger):
        for handler in self._handlers:
            if handler not in logger.handlers:
                logger.addHandler(handler)

    def add_handler(self, handler):
        """
        @param handler logging.Handler, also attached to all loggers this
            factory already returned
        """
        self._handlers.append(handler)
        for logger in self._loggers.values():
            self._attach(logger)

    def remove_handler(self, handler):
        self._handlers.remove(handler)
        for logger in self._loggers.values():
            logger.removeHandler(handler)

log_factory = LogFactory()

def getLogger(loggername=__name__):
    return log_factory.get_logger(loggername)
