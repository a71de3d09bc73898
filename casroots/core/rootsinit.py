#!/usr/bin/env python

"""
@file casroots/core/rootsinit.py
@brief definitions and code that needs to run for any use of casroots
"""

import ast
import logging
import logging.config
import os
import os.path

from casroots.core import rootsconst as rc
from casroots.util.config import Config
from casroots.util.path import adjust_dir

# Load configuration properties for any module to access
roots_config = Config(rc.CONF_FILENAME)

# Update configuration with local override config
roots_config.update_from_file(rc.LOCAL_CONF_FILENAME)

def config(name):
    """
    Get a subtree of the global configuration, typically for a module
    """
    return Config(name, roots_config)

def configure_logging():
    """
    @brief Configure logging system (console, other loggers) from the
        central logging configuration file, then apply per module levels.
        Called once by command line entry points; library code only ever
        obtains loggers.
    """
    logconf = adjust_dir(rc.LOGCONF_FILENAME)
    altconf = os.environ.get(rc.ALTERNATE_LOGGING_CONF)
    if altconf:
        # make sure that path exists
        altpath = adjust_dir(altconf)
        if os.path.exists(altpath):
            logconf = altpath
        else:
            print("Warning: %s specified (%s), but not found" % (rc.ALTERNATE_LOGGING_CONF, altpath))

    logging.config.fileConfig(logconf, disable_existing_loggers=False)
    set_log_levels()

def set_log_levels(levelfile=None):
    """
    Sets logging levels of per module loggers to given values. Loggers of
    packages are higher in the chain of module specific loggers.
    If called with None argument, will read the global and local files with
    log levels. Otherwise, read the file indicated by levelfile and if it
    exists, set the log levels as given.
    """
    if levelfile is None:
        set_log_levels(rc.LOGLEVELS_FILENAME)
        set_log_levels(rc.LOGLEVELS_LOCAL_FILENAME)
        return

    filename = adjust_dir(levelfile)
    if not os.path.isfile(filename):
        return
    with open(filename) as f:
        levellist = ast.literal_eval(f.read())
    if not levellist:
        return
    assert type(levellist) is list
    for name, level in levellist:
        logging.getLogger(name).setLevel(level)
