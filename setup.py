#!/usr/bin/env python

"""
@file setup.py
@brief setup file for casroots, the orphaned root analyzer for
    content-addressed block stores
@see https://setuptools.pypa.io/
"""

import os
import re

from setuptools import setup, find_packages

def read_version():
    # casroots/__init__.py is not imported, dependencies may be missing
    with open(os.path.join(os.path.dirname(__file__), 'casroots', '__init__.py')) as f:
        return re.search(r"__version__ = '([^']+)'", f.read()).group(1)

setup( name = 'casroots',
       version = read_version(),
       description = 'Finds and ranks unpinned root objects of a content-addressed block store',
       license = 'Apache 2.0',
       keywords = ['content-addressed', 'garbage collection', 'pinning'],

       packages = find_packages(include=['casroots', 'casroots.*']),
       package_data = {
           'casroots': ['res/config/*.config', 'res/logging/*.conf', 'res/logging/*.cfg'],
                      },
       python_requires = '>=3.8',
       install_requires = [
           'Twisted>=22.10',
           'zope.interface>=5.0',
           'msgpack>=1.0',
                          ],
       extras_require = {
           'test': ['pytest'],
                        },
       entry_points = {
                        'console_scripts': [
                            'casroots-findroots=casroots.ops.findroots:main',
                            ],
                        },
       include_package_data = True,
       classifiers = [
           'Development Status :: 3 - Alpha',
           'Environment :: Console',
           'Intended Audience :: System Administrators',
           'License :: OSI Approved :: Apache Software License',
           'Operating System :: OS Independent',
           'Programming Language :: Python :: 3',
           'Topic :: System :: Filesystems'
                     ]
     )
