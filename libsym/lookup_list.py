#!/usr/bin/env python3
#
#   Lookup lists: immutable sequences with binary search lookups
#

import logging

from libsym.arrays import binary_search, check_index, is_sorted, is_unique_sorted, run_offsets, runs, same
from libsym.errors import LengthMismatch
from libsym.sort_assigner import SortAssigner

logger = logging.getLogger(__name__)

class LookupList:
    """
    Immutable sequence that keeps the order it was built with, while answering
    index_of, last_index_of, indexes_of, contains and group by binary search
    on a sorted copy of its elements.

    The list owns copies of
        sorted          the elements in ascending order
        sort_ranking    original index -> sorted index
        unsort_ranking  sorted index -> original index
    """

    def __init__(self, seq=(), key=None, allow_none : bool = False, allow_duplicates : bool = True):
        self._build(SortAssigner(key, allow_none, allow_duplicates), list(seq))

    @classmethod
    def using(cls, assigner : SortAssigner, seq=()):
        """
        List ordered by an existing SortAssigner
        """
        result = cls.__new__(cls)
        result._build(assigner, list(seq))
        return result

    def _build(self, assigner, elements):
        sort = assigner.sort(elements)
        self._init(assigner, sort.apply(elements), sort, sort.invert(), is_sorted(assigner.keys(elements)))

    def _init(self, assigner, sorted_elements, sort, unsort, ordered):
        self.assigner = assigner
        self.sorted = sorted_elements
        self.sorted_keys = assigner.keys(sorted_elements)
        self.sort_ranking = sort
        self.unsort_ranking = unsort
        self.ordered = ordered
        self.unique = is_unique_sorted(self.sorted_keys)

    def search(self, value):
        # sorted index of some occurrence of value, or -1
        if value is None and not self.assigner.allow_none:
            return -1
        return binary_search(self.sorted_keys, self.assigner.sort_key(value))

    def get(self, i : int):
        check_index(i, len(self.sorted))
        return self.sorted[self.sort_ranking.apply(i)]

    def size(self):
        return len(self.sorted)

    def index_of(self, value):
        """
        Smallest index holding value, or -1
        """
        idx = self.search(value)
        return -1 if idx < 0 else self.unsort_ranking.apply(idx)

    def last_index_of(self, value):
        """
        Largest index holding value, or -1
        """
        idx = self.search(value)
        if idx < 0:
            return -1
        # the last occurrence holds the far end of the run on the side the probing finished on
        direction = -1 if idx > 0 and same(self.sorted_keys[idx - 1], self.sorted_keys[idx]) else 1
        peek = idx + direction
        while 0 <= peek < len(self.sorted_keys) and same(self.sorted_keys[peek], self.sorted_keys[idx]):
            idx = peek
            peek += direction
        return self.unsort_ranking.apply(idx)

    def contains(self, value):
        return self.index_of(value) >= 0

    def indexes_of(self, value, limit : int = -1):
        """
        Ascending indices holding value, at most limit of them unless limit is negative.

        When the list holds more than limit occurrences, which ones are returned is
        unspecified.
        """
        idx = self.search(value)
        if idx < 0 or limit == 0:
            return []
        result = []
        for offset in run_offsets(idx, self.sorted_keys):
            result.append(self.unsort_ranking.apply(idx + offset))
            if len(result) == limit:
                break
        return sorted(result)

    def count(self, value):
        return len(self.indexes_of(value))

    def group(self):
        """
        Maps each distinct value to the ascending list of all indices holding it
        """
        groups = {}
        for start, end in runs(self.sorted_keys):
            groups[self.sorted[start]] = sorted(self.unsort_ranking.apply(j) for j in range(start, end))
        return groups

    def sort(self):
        """
        The elements in ascending order. A list that is sorted already returns
        itself, uncopied, as a LookupList; otherwise the result is a plain list.
        """
        if self.ordered:
            return self
        return list(self.sorted)

    def sort_unique(self):
        if self.unique:
            return self.sort()
        return [self.sorted[start] for start, _ in runs(self.sorted_keys)]

    def shuffle(self, p):
        """
        The list with its elements rearranged by p, that is built from p.apply(self)
        """
        if len(p) != len(self):
            raise LengthMismatch(f"cannot shuffle {len(self)} elements with a ranking of length {len(p)}")
        if self.unique:
            logger.debug("shuffle of %d unique elements reuses the sorted copy", len(self))
            unsort = p.compose(self.unsort_ranking)
            sort = unsort.invert()
            result = self.__class__.__new__(self.__class__)
            result._init(self.assigner, self.sorted, sort, unsort, is_sorted(unsort.apply(self.sorted_keys)))
            return result
        logger.debug("shuffle of %d elements with duplicates rebuilds the list", len(self))
        return self.using(self.assigner, p.apply(self.to_list()))

    def is_unique(self):
        return self.unique

    def is_sorted(self):
        return self.ordered

    def to_list(self):
        return [self.sorted[s] for s in self.sort_ranking]

    def __len__(self):
        return len(self.sorted)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return [self.get(j) for j in range(len(self))[i]]
        if i < 0:
            i += len(self)
        return self.get(i)

    def __iter__(self):
        for s in self.sort_ranking:
            yield self.sorted[s]

    def __contains__(self, value):
        return self.contains(value)

    def __eq__(self, other):
        if isinstance(other, LookupList):
            return self.to_list() == other.to_list()
        if isinstance(other, (list, tuple)):
            return self.to_list() == list(other)
        return False

    def __hash__(self):
        return hash(tuple(self))

    def __str__(self):
        return str(self.to_list())

    def __repr__(self):
        return f"LookupList({self.to_list()!r})"

########################################################################################################################
#   Unit Tests
########################################################################################################################

import random
import unittest

from libsym.errors import DuplicateRejected, IndexOutOfRange, NullElement
from libsym.ranking import Ranking

class TestLookupList(unittest.TestCase):

    def random_lists(self, rng, num_tests=40):
        yield []
        yield [5]
        yield [5] * 7
        for _ in range(num_tests):
            n = rng.randrange(1, 30)
            yield [rng.randrange(0, 8) for _ in range(n)]

    def test_example(self):
        a = [8, 6, 8, 1, 6]
        L = LookupList(a)
        self.assertEqual(L.index_of(8), 0)
        self.assertEqual(L.last_index_of(8), 2)
        self.assertEqual(L.index_of(6), 1)
        self.assertEqual(L.last_index_of(6), 4)
        self.assertEqual(L.indexes_of(6, -1), [1, 4])
        self.assertEqual(L.group(), {8: [0, 2], 6: [1, 4], 1: [3]})
        self.assertEqual(L.index_of(7), -1)
        self.assertEqual(L.last_index_of(7), -1)
        self.assertEqual(L.indexes_of(7), [])
        self.assertFalse(L.is_unique())
        self.assertFalse(L.is_sorted())

    def test_extremal_indices(self):
        rng = random.Random(23)
        for a in self.random_lists(rng):
            L = LookupList(a)
            for v in range(-1, 9):
                expected = [i for i, x in enumerate(a) if x == v]
                self.assertEqual(L.index_of(v), expected[0] if expected else -1, msg=f"{a = } {v = }")
                self.assertEqual(L.last_index_of(v), expected[-1] if expected else -1, msg=f"{a = } {v = }")
                self.assertEqual(L.contains(v), v in a)
                self.assertEqual(v in L, v in a)
                self.assertEqual(L.indexes_of(v), expected)
                self.assertEqual(L.count(v), len(expected))

    def test_indexes_of_limit(self):
        rng = random.Random(29)
        for a in self.random_lists(rng):
            L = LookupList(a)
            for v in set(a):
                occurrences = [i for i, x in enumerate(a) if x == v]
                self.assertEqual(L.indexes_of(v, 1), [L.index_of(v)])
                self.assertEqual(len(L.indexes_of(v, 2)) == 2, len(occurrences) >= 2)
                self.assertEqual(L.indexes_of(v, 0), [])
                for limit in range(1, len(occurrences) + 2):
                    found = L.indexes_of(v, limit)
                    self.assertEqual(len(found), min(limit, len(occurrences)))
                    self.assertEqual(found, sorted(found))
                    self.assertTrue(set(found) <= set(occurrences))

    def test_group(self):
        rng = random.Random(31)
        for a in self.random_lists(rng):
            groups = LookupList(a).group()
            self.assertEqual(set(groups), set(a))
            for v, indices in groups.items():
                self.assertEqual(indices, [i for i, x in enumerate(a) if x == v])

    def test_get(self):
        rng = random.Random(37)
        for a in self.random_lists(rng):
            L = LookupList(a)
            self.assertEqual(len(L), len(a))
            self.assertEqual(L.size(), len(a))
            self.assertEqual([L.get(i) for i in range(len(a))], a)
            self.assertEqual(list(L), a)
            self.assertEqual(L, a)
            self.assertEqual(L.sort_ranking.apply(a), L.sorted)
            self.assertEqual(L.unsort_ranking.apply(L.sorted), a)
            self.assertEqual(L.unsort_ranking, L.sort_ranking.invert())
        L = LookupList([1, 2, 3])
        with self.assertRaises(IndexOutOfRange):
            L.get(3)
        with self.assertRaises(IndexOutOfRange):
            L.get(-1)
        self.assertEqual(L[-1], 3)
        self.assertEqual(L[1:], [2, 3])

    def test_copy_in(self):
        a = [1, 2, 3]
        L = LookupList(a)
        self.assertEqual(L.index_of(2), 1)
        a[1] = 7
        self.assertEqual(L.get(1), 2)
        self.assertEqual(L.index_of(2), 1)
        self.assertEqual(L.index_of(7), -1)

    def test_sort(self):
        L = LookupList([3, 1, 2, 1])
        self.assertEqual(L.sort(), [1, 1, 2, 3])
        self.assertIsInstance(L.sort(), list)
        self.assertEqual(L.sort_unique(), [1, 2, 3])
        ordered = LookupList([1, 2, 2, 5])
        self.assertTrue(ordered.is_sorted())
        self.assertIs(ordered.sort(), ordered)
        self.assertEqual(ordered.sort_unique(), [1, 2, 5])
        unique = LookupList([4, 2, 9])
        self.assertTrue(unique.is_unique())
        self.assertEqual(unique.sort_unique(), [2, 4, 9])

    def test_shuffle_unique(self):
        rng = random.Random(41)
        for n in range(0, 12):
            a = rng.sample(range(100), n)
            L = LookupList(a)
            self.assertTrue(L.is_unique())
            p = Ranking.random(n, seed=n)
            S = L.shuffle(p)
            self.assertIs(S.sorted, L.sorted)
            self.assertEqual(S.to_list(), p.apply(a))
            for i in range(n):
                self.assertEqual(S.get(p.apply(i)), L.get(i))
            for v in a:
                self.assertEqual(S.index_of(v), p.apply(a.index(v)))
            self.assertEqual(S.is_sorted(), p.apply(a) == sorted(a))

    def test_shuffle_duplicates(self):
        rng = random.Random(43)
        for a in self.random_lists(rng):
            L = LookupList(a)
            p = Ranking.random(len(a), seed=len(a))
            S = L.shuffle(p)
            b = p.apply(a)
            self.assertEqual(S.to_list(), b)
            for v in set(a):
                self.assertEqual(S.index_of(v), b.index(v))
                self.assertEqual(S.group()[v], [i for i, x in enumerate(b) if x == v])
        for a in ([1, 2, 3], [1, 1, 2]):
            with self.assertRaises(LengthMismatch):
                LookupList(a).shuffle(Ranking([1, 0]))
            with self.assertRaises(LengthMismatch):
                LookupList(a).shuffle(Ranking([1, 0, 2, 3]))

    def test_shuffle_to_sorted(self):
        L = LookupList([3, 1, 2])
        S = L.shuffle(Ranking([2, 0, 1]))
        self.assertEqual(S.to_list(), [1, 2, 3])
        self.assertTrue(S.is_sorted())

    def test_key(self):
        L = LookupList(["b", "A", "c", "a", "B"], key=str.lower)
        self.assertEqual(L.index_of("a"), 1)
        self.assertEqual(L.last_index_of("A"), 3)
        self.assertEqual(L.indexes_of("B"), [0, 4])
        self.assertEqual(L.sort_unique(), ["A", "b", "c"])
        self.assertEqual(L.group(), {"A": [1, 3], "b": [0, 4], "c": [2]})

    def test_none(self):
        with self.assertRaises(NullElement):
            LookupList([1, None])
        self.assertEqual(LookupList([1, 2]).index_of(None), -1)
        L = LookupList([2, None, 1, None], allow_none=True)
        self.assertEqual(L.index_of(None), 1)
        self.assertEqual(L.last_index_of(None), 3)
        self.assertEqual(L.sort(), [None, None, 1, 2])

    def test_unique_constraint(self):
        with self.assertRaises(DuplicateRejected):
            LookupList([1, 2, 1], allow_duplicates=False)
        L = LookupList([3, 1, 2], allow_duplicates=False)
        self.assertEqual(L.index_of(2), 2)

    def test_repr(self):
        self.assertEqual(repr(LookupList([2, 1])), "LookupList([2, 1])")
        self.assertEqual(str(LookupList([2, 1])), "[2, 1]")
