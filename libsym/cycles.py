#!/usr/bin/env python3
#
#   Cycle decomposition and in-place application of rankings
#

import numpy as np

from libsym.arrays import check_length
from libsym.errors import InvalidRanking, LengthMismatch
from libsym.ranking import Ranking

def orbit(ranking : Ranking, i : int):
    return ranking.orbit(i)

def to_cycles(ranking : Ranking):
    """
    Disjoint non-trivial cycles of ranking, fixed points omitted
    """
    return ranking.cycles()

def from_cycles(cycles, length=None):
    """
    Ranking sending each element of a cycle to the next one, wrapping around.

    The result has length max(index) + 1, or length if given. Indices in no
    cycle are fixed.
    """
    cycles = [tuple(c) for c in cycles]
    indices = [i for c in cycles for i in c]
    size = max(indices) + 1 if len(indices) > 0 else 0
    if length is not None:
        if length < size:
            raise LengthMismatch(f"cycles move index {size - 1}, beyond length {length}")
        size = length

    seen = [False] * size
    for i in indices:
        if i < 0:
            raise InvalidRanking(f"negative index {i} in cycles")
        if seen[i]:
            raise InvalidRanking(f"index {i} appears in more than one place")
        seen[i] = True

    ranking = list(range(size))
    for c in cycles:
        for k, i in enumerate(c):
            ranking[i] = c[(k + 1) % len(c)]
    return Ranking._trusted(ranking)

def to_transpositions(ranking : Ranking):
    """
    Swaps (j, k) whose swap rankings multiply, left to right, to ranking.
    A cycle (c0 c1 ... cm) gives (c0, c1), (c1, c2), ..., (cm-1, cm).
    """
    return [(c[k], c[k + 1]) for c in ranking.cycles() for k in range(len(c) - 1)]

class Cycles:
    """
    Ranking stored as its disjoint cycles, which can rearrange a buffer in
    place. Buffers are indexable, mutable and one-dimensional.
    """

    def __init__(self, cycles, length=None):
        self.cycles = tuple(tuple(c) for c in cycles if len(c) > 1)
        # validates the cycles
        self.ranking = from_cycles(self.cycles, length)
        self.length = len(self.ranking)

    @staticmethod
    def of(ranking : Ranking):
        return Cycles(ranking.cycles(), len(ranking))

    def clobber(self, buffer):
        """
        In place version of ranking.apply(buffer)
        """
        check_length(self.length, len(buffer))
        for c in self.cycles:
            for j in reversed(range(len(c) - 1)):
                buffer[c[j]], buffer[c[j + 1]] = buffer[c[j + 1]], buffer[c[j]]

    def unclobber(self, buffer):
        """
        Undoes clobber(buffer)
        """
        check_length(self.length, len(buffer))
        for c in self.cycles:
            for j in range(len(c) - 1):
                buffer[c[j]], buffer[c[j + 1]] = buffer[c[j + 1]], buffer[c[j]]

    def apply(self, seq):
        if isinstance(seq, np.ndarray):
            result = seq.copy()
            self.clobber(result)
            return result
        result = list(seq)
        self.clobber(result)
        if isinstance(seq, str):
            return "".join(result)
        if isinstance(seq, tuple):
            return tuple(result)
        return result

    def __call__(self, i : int):
        # indices outside the cycles stay where they are
        for c in self.cycles:
            if i in c:
                return c[(c.index(i) + 1) % len(c)]
        return i

    def to_ranking(self):
        return self.ranking

    def transpositions(self):
        return to_transpositions(self.ranking)

    def num_cycles(self):
        return len(self.cycles)

    def __len__(self):
        return self.length

    def __eq__(self, other):
        if not isinstance(other, Cycles):
            return False
        return self.ranking == other.ranking

    def __hash__(self):
        return hash(self.ranking)

    def __str__(self):
        return "".join("(" + " ".join(str(i) for i in c) + ")" for c in self.cycles) or "()"

    def __repr__(self):
        return f"Cycles({list(self.cycles)}, length={self.length})"

########################################################################################################################
#   Unit Tests
########################################################################################################################

import unittest
from itertools import permutations

class TestCycles(unittest.TestCase):

    def test_to_cycles(self):
        p = Ranking([2, 0, 1, 3, 5, 4])
        self.assertEqual(to_cycles(p), [(0, 2, 1), (4, 5)])
        self.assertEqual(orbit(p, 1), [1, 0, 2])
        self.assertEqual(to_cycles(Ranking.identity(4)), [])

    def test_round_trip(self):
        for n in range(6):
            for t in permutations(range(n)):
                p = Ranking(t)
                self.assertEqual(from_cycles(to_cycles(p), len(p)), p)
                self.assertEqual(from_cycles(to_cycles(p)).pad(len(p)), p)
                self.assertEqual(Cycles.of(p).to_ranking(), p)

    def test_from_cycles(self):
        self.assertEqual(from_cycles([(0, 1, 2)]), Ranking([1, 2, 0]))
        self.assertEqual(from_cycles([(4, 1)]), Ranking([0, 4, 2, 3, 1]))
        self.assertEqual(from_cycles([]), Ranking())
        self.assertEqual(from_cycles([(1, 0)], length=3), Ranking([1, 0, 2]))
        with self.assertRaises(InvalidRanking):
            from_cycles([(0, 1), (1, 2)])
        with self.assertRaises(InvalidRanking):
            from_cycles([(0, -1)])
        with self.assertRaises(LengthMismatch):
            from_cycles([(0, 3)], length=2)

    def test_transpositions(self):
        self.assertEqual(to_transpositions(Ranking.cycle(0, 1, 2)), [(0, 1), (1, 2)])
        p = Ranking.random(30, seed=5)
        swaps = [Ranking.swap(j, k).pad(len(p)) for j, k in to_transpositions(p)]
        self.assertEqual(Ranking.product(Ranking.identity(len(p)), *swaps), p)
        buffer = list(range(30))
        for j, k in reversed(to_transpositions(p)):
            buffer[j], buffer[k] = buffer[k], buffer[j]
        self.assertEqual(buffer, p.apply(list(range(30))))

    def test_clobber(self):
        for seed in range(10):
            p = Ranking.random(40, seed=seed)
            c = p.to_cycles()
            buffer = [f"x{i}" for i in range(45)]
            original = list(buffer)
            c.clobber(buffer)
            self.assertEqual(buffer, p.apply(original))
            c.unclobber(buffer)
            self.assertEqual(buffer, original)

    def test_clobber_numpy(self):
        p = Ranking.random(12, seed=2)
        buffer = np.arange(12) * 10
        p.to_cycles().clobber(buffer)
        self.assertEqual(buffer.tolist(), p.apply(np.arange(12) * 10).tolist())

    def test_clobber_short(self):
        c = Cycles.of(Ranking([1, 2, 0]))
        with self.assertRaises(LengthMismatch):
            c.clobber([1, 2])
        with self.assertRaises(LengthMismatch):
            c.unclobber([1, 2])

    def test_apply(self):
        c = Cycles.of(Ranking.cycle1(1, 2, 3))
        self.assertEqual(c.apply(["a", "b", "c"]), ["c", "a", "b"])
        self.assertEqual(c.apply("abcd"), "cabd")
        self.assertEqual(c.apply((1, 2, 3)), (3, 1, 2))
        p = Ranking.random(20, seed=9)
        c = Cycles.of(p)
        for i in range(20):
            self.assertEqual(c(i), p(i))
        self.assertEqual(c(25), 25)

    def test_misc(self):
        c = Cycles([(0, 2, 1), (4, 5), (3,)])
        self.assertEqual(c.num_cycles(), 2)
        self.assertEqual(len(c), 6)
        self.assertEqual(str(c), "(0 2 1)(4 5)")
        self.assertEqual(str(Cycles([])), "()")
        self.assertEqual(c, Cycles.of(Ranking([2, 0, 1, 3, 5, 4])))
        self.assertEqual(c.transpositions(), [(0, 2), (2, 1), (4, 5)])
