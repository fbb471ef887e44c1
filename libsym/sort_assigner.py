#!/usr/bin/env python3
#
#   Sort rankings with deterministic slots for repeated values
#

import logging

from libsym.arrays import binary_search, is_sorted, next_offset, same
from libsym.errors import DuplicateRejected, LengthMismatch, NotARearrangement, NullElement, SlotExhausted
from libsym.ranking import Ranking

logger = logging.getLogger(__name__)

def identity_key(x):
    return x

def none_first(key):
    def wrapped(x):
        return (0,) if x is None else (1, key(x))
    return wrapped

def assign_slots(keys, sorted_keys, error):
    """
    Gives each entry of keys its own position of an equal entry in sorted_keys.

    Every occurrence of a value binary-searches to the same hit idx. The first
    one takes idx itself, later ones walk right through the run of equal
    entries and, once its right end is reached, left from idx - 1. Raises
    error when a key has no equal entry or the run has no free position left.
    """
    slots = [0] * len(keys)
    cursors = {}
    for i, k in enumerate(keys):
        idx = binary_search(sorted_keys, k)
        if idx < 0:
            raise error(f"no slot for the element at index {i}")
        if idx in cursors:
            offset = next_offset(idx, cursors[idx], sorted_keys)
            if offset is None:
                raise error(f"run of equal elements exhausted at index {i}")
        else:
            offset = 0
        cursors[idx] = offset
        slots[i] = idx + offset
    return slots

class SortAssigner:
    """
    Computes the ranking that sorts a sequence.

    key orders the elements like the key argument of sorted(). Elements whose
    keys do not order either way are treated as equal. None is rejected with
    NullElement unless allow_none is set, in which case it sorts first.
    With allow_duplicates unset, equal elements raise DuplicateRejected.
    """

    def __init__(self, key=None, allow_none : bool = False, allow_duplicates : bool = True):
        self.key = key
        self.allow_none = allow_none
        self.allow_duplicates = allow_duplicates

        key = key or identity_key
        self.sort_key = none_first(key) if allow_none else key

    def keys(self, elements):
        if not self.allow_none:
            for i, x in enumerate(elements):
                if x is None:
                    raise NullElement(f"None at index {i}")
        return [self.sort_key(x) for x in elements]

    def sort(self, seq):
        """
        Returns a ranking with sort.apply(seq) ascending, where the first occurrence
        of each value lands on the position a binary search of the sorted copy hits
        """
        elements = list(seq)
        keys = self.keys(elements)
        order = sorted(range(len(keys)), key=keys.__getitem__)
        sorted_keys = [keys[i] for i in order]

        if not self.allow_duplicates:
            for j in range(1, len(sorted_keys)):
                if same(sorted_keys[j - 1], sorted_keys[j]):
                    raise DuplicateRejected(f"duplicate element {elements[order[j]]!r}")

        logger.debug("assigning sort slots for %d elements", len(keys))
        return Ranking(assign_slots(keys, sorted_keys, SlotExhausted))

    def taking(self, a, b):
        """
        Returns a ranking r with r.apply(a) == b
        """
        a, b = list(a), list(b)
        if len(a) != len(b):
            raise LengthMismatch(f"cannot take length {len(a)} to length {len(b)}")
        sort = self.sort(b)
        unsort = sort.invert()
        sorted_keys = sort.apply(self.keys(b))
        slots = assign_slots(self.keys(a), sorted_keys, NotARearrangement)
        return Ranking([unsort.apply(s) for s in slots])

    def sorts(self, ranking, seq):
        return is_sorted(ranking.apply(self.keys(list(seq))))

DEFAULT = SortAssigner()

def sort_ranking(seq, key=None):
    if key is None:
        return DEFAULT.sort(seq)
    return SortAssigner(key=key).sort(seq)

########################################################################################################################
#   Unit Tests
########################################################################################################################

import random
import unittest

class TestSortAssigner(unittest.TestCase):

    def random_inputs(self, rng):
        yield []
        yield [3]
        for n in range(1, 10):
            yield [7] * n
        for _ in range(50):
            n = rng.randrange(1, 40)
            yield [rng.randrange(-5, 5) for _ in range(n)]

    def test_sorts(self):
        rng = random.Random(17)
        for a in self.random_inputs(rng):
            sort = sort_ranking(a)
            self.assertEqual(len(sort), len(a))
            self.assertEqual(sort.apply(a), sorted(a))
            self.assertTrue(sort.sorts(a))

    def test_sorts_with_key(self):
        rng = random.Random(5)
        for a in self.random_inputs(rng):
            sort = sort_ranking(a, key=lambda x: -x)
            self.assertEqual(sort.apply(a), sorted(a, reverse=True))
        words = ["b", "A", "c", "a", "B"]
        sort = Ranking.sort(words, key=str.lower)
        self.assertEqual([w.lower() for w in sort.apply(words)], ["a", "a", "b", "b", "c"])

    def test_first_occurrence_on_search_hit(self):
        rng = random.Random(11)
        for a in self.random_inputs(rng):
            sort = sort_ranking(a)
            unsort = sort.invert()
            sorted_a = sort.apply(a)
            for v in set(a):
                self.assertEqual(unsort.apply(binary_search(sorted_a, v)), a.index(v))

    def test_known_values(self):
        a = [4, 6, 10, -5, 195, 33, 2]
        sort = Ranking.sort(a)
        sorted_a = sorted(a)
        self.assertEqual(sort.apply(2), sorted_a.index(10))
        self.assertEqual(sort.invert().apply(sort.apply(2)), 2)
        self.assertEqual(sort.invert().apply(2), a.index(sorted_a[2]))

    def test_slots_in_probe_order(self):
        # the hit for 1 is position 1: right end of the run first, then left
        self.assertEqual(assign_slots([1, 1, 1], [1, 1, 1], SlotExhausted), [1, 2, 0])
        with self.assertRaises(SlotExhausted):
            assign_slots([1, 1, 1], [1, 1, 2], SlotExhausted)
        with self.assertRaises(SlotExhausted):
            assign_slots([3], [1], SlotExhausted)

    def test_none(self):
        with self.assertRaises(NullElement):
            sort_ranking([1, None, 2])
        assigner = SortAssigner(allow_none=True)
        a = [2, None, 1, None]
        self.assertEqual(assigner.sort(a).apply(a), [None, None, 1, 2])

    def test_duplicates_rejected(self):
        strict = SortAssigner(allow_duplicates=False)
        self.assertEqual(strict.sort([3, 1, 2]).apply([3, 1, 2]), [1, 2, 3])
        with self.assertRaisesRegex(DuplicateRejected, "2"):
            strict.sort([2, 1, 2])

    def test_taking(self):
        rng = random.Random(3)
        for a in self.random_inputs(rng):
            b = list(a)
            rng.shuffle(b)
            self.assertEqual(Ranking.taking(a, b).apply(a), b)
        with self.assertRaises(NotARearrangement):
            Ranking.taking([1, 2, 2], [1, 1, 2])
        with self.assertRaises(NotARearrangement):
            Ranking.taking([1, 2], [1, 3])
        with self.assertRaises(LengthMismatch):
            Ranking.taking([1, 2], [1, 2, 3])

    def test_sorts_check(self):
        self.assertTrue(Ranking([1, 0]).sorts([2, 1]))
        self.assertFalse(Ranking([0, 1]).sorts([2, 1]))
        with self.assertRaises(LengthMismatch):
            Ranking([0, 1, 2]).sorts([2, 1])
