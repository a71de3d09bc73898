"""
@file casroots/roots/ranker.py
@brief Report order of classified objects.

Objects of a known type come first, unknown ones last. Within each group
pinned objects precede unpinned ones, and larger objects precede smaller.
"""

import functools

from casroots.core.rootsconst import UNKNOWN_TYPE

def _pinned_then_size_less(a, b):
    if a.pinned and not b.pinned:
        return True
    if b.pinned and not a.pinned:
        return False
    return a.total_size > b.total_size

def object_info_less(a, b):
    """
    @retval True if a is listed before b
    """
    if a.type == UNKNOWN_TYPE:
        if b.type != UNKNOWN_TYPE:
            return False

        return _pinned_then_size_less(a, b)

    if b.type == UNKNOWN_TYPE:
        return True

    return _pinned_then_size_less(a, b)

def compare_object_infos(a, b):
    if object_info_less(a, b):
        return -1
    if object_info_less(b, a):
        return 1
    return 0

def sort_object_infos(infos):
    """
    @brief Stable sort; objects that compare equal keep their input order.
    @retval new list of ObjectInfo
    """
    return sorted(infos, key=functools.cmp_to_key(compare_object_infos))
