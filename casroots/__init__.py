"""
@file casroots/__init__.py
@brief casroots: orphaned root analysis for a local content-addressed block store
"""

__version__ = '0.1.0'
