#!/usr/bin/env python3
#
#   Searching and probing ascending key lists
#

from libsym.errors import IndexOutOfRange, LengthMismatch

def same(a, b):
    # equal under the ordering, which may differ from ==
    return not (a < b or b < a)

def check_length(required : int, actual : int):
    if actual < required:
        raise LengthMismatch(f"length {actual} is less than required length {required}")

def check_index(i : int, length : int):
    if not (0 <= i < length):
        raise IndexOutOfRange(f"index {i} not in [0, {length})")

def sequence(start, end, inclusive=False):
    """
    start, start +- 1, ... towards end
    """
    direction = 1 if start < end else -1
    if inclusive:
        end += direction
    return list(range(start, end, direction))

def binary_search(keys, k):
    """
    Position of some entry of the ascending list keys that is equal to k, or -1.

    With repeated keys the hit is not necessarily the leftmost one, but it only
    depends on the comparisons made, so equal k always land on the same position.
    """
    lo, hi = 0, len(keys) - 1
    while lo <= hi:
        mid = (lo + hi) >> 1
        if keys[mid] < k:
            lo = mid + 1
        elif k < keys[mid]:
            hi = mid - 1
        else:
            return mid
    return -1

def next_offset(idx, offset, keys):
    """
    Walks the run of keys equal to keys[idx]: offsets 0, 1, 2, ... to the right
    end of the run, then -1, -2, ... to its left end. Returns None once the run
    is exhausted.
    """
    if offset >= 0:
        nxt = idx + offset + 1
        if nxt < len(keys) and same(keys[nxt], keys[idx]):
            return offset + 1
        if idx > 0 and same(keys[idx - 1], keys[idx]):
            return -1
        return None
    nxt = idx + offset - 1
    if nxt >= 0 and same(keys[nxt], keys[idx]):
        return offset - 1
    return None

def run_offsets(idx, keys):
    offset = 0
    while offset is not None:
        yield offset
        offset = next_offset(idx, offset, keys)

def runs(keys):
    """
    (start, end) of every maximal run of equal entries of an ascending list
    """
    mark = 0
    for i in range(1, len(keys)):
        if not same(keys[i], keys[mark]):
            yield mark, i
            mark = i
    if len(keys) != 0:
        yield mark, len(keys)

def is_sorted(keys):
    return all(not keys[i] < keys[i - 1] for i in range(1, len(keys)))

def is_unique_sorted(keys):
    return all(not same(keys[i], keys[i - 1]) for i in range(1, len(keys)))

########################################################################################################################
#   Unit Tests
########################################################################################################################

import unittest

class TestArrays(unittest.TestCase):

    def test_binary_search(self):
        keys = [1, 3, 5, 7, 9]
        for i, k in enumerate(keys):
            self.assertEqual(binary_search(keys, k), i)
        self.assertEqual(binary_search(keys, 4), -1)
        self.assertEqual(binary_search(keys, 10), -1)
        self.assertEqual(binary_search([], 1), -1)

    def test_binary_search_duplicates(self):
        keys = [1, 1, 1, 2, 2]
        self.assertIn(binary_search(keys, 1), (0, 1, 2))
        self.assertIn(binary_search(keys, 2), (3, 4))

    def test_run_offsets(self):
        keys = [0, 2, 2, 2, 2, 3]
        # hit in the middle of the run: right end first, then left end
        self.assertEqual(list(run_offsets(2, keys)), [0, 1, 2, -1])
        self.assertEqual(list(run_offsets(1, keys)), [0, 1, 2, 3])
        self.assertEqual(list(run_offsets(4, keys)), [0, -1, -2, -3])
        self.assertEqual(list(run_offsets(0, keys)), [0])

    def test_runs(self):
        self.assertEqual(list(runs([1, 1, 2, 3, 3, 3])), [(0, 2), (2, 3), (3, 6)])
        self.assertEqual(list(runs([])), [])

    def test_sequence(self):
        self.assertEqual(sequence(2, 0, True), [2, 1, 0])
        self.assertEqual(sequence(1, 3, True), [1, 2, 3])
        self.assertEqual(sequence(0, 3), [0, 1, 2])
        self.assertEqual(sequence(4, 4, True), [4])

    def test_checks(self):
        check_length(3, 3)
        with self.assertRaises(LengthMismatch):
            check_length(3, 2)
        check_index(0, 1)
        with self.assertRaises(IndexOutOfRange):
            check_index(1, 1)
        with self.assertRaises(IndexOutOfRange):
            check_index(-1, 1)

    def test_sorted_unique(self):
        self.assertTrue(is_sorted([1, 1, 2]))
        self.assertFalse(is_sorted([2, 1]))
        self.assertTrue(is_unique_sorted([1, 2, 3]))
        self.assertFalse(is_unique_sorted([1, 2, 2]))
