#!/usr/bin/env python

"""
@file casroots/core/rootsconst.py
@brief definitions of casroots package wide constants
"""

# Name of central logging configuration file
LOGCONF_FILENAME = 'res/logging/casrootslogging.conf'

# Name of environment variable to override logging configuration
ALTERNATE_LOGGING_CONF = 'CASROOTS_ALTERNATE_LOGGING_CONF'

# Per module log level lists
LOGLEVELS_FILENAME = 'res/logging/loglevels.cfg'
LOGLEVELS_LOCAL_FILENAME = 'res/logging/loglevelslocal.cfg'

# Name of central casroots configuration file (not to be changed)
CONF_FILENAME = 'res/config/casroots.config'

# Name of local config override file (can be changed locally)
LOCAL_CONF_FILENAME = 'res/config/casrootslocal.config'

# Name of environment variable pointing at the repository
REPO_PATH_ENV = 'CASROOTS_PATH'

# Type tag of objects whose payload is not a typed file-system node
UNKNOWN_TYPE = 'unknown'

from casroots import __version__ as VERSION
