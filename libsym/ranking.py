#!/usr/bin/env python3
#
#   Rankings: permutations of {0, ..., n-1} in one-line notation
#

import math
import operator

import numpy as np

from libsym.arrays import check_index, check_length, sequence
from libsym.errors import InvalidRanking, LengthMismatch

def is_ranking(a):
    seen = [False] * len(a)
    for v in a:
        if not (0 <= v < len(a)) or seen[v]:
            return False
        seen[v] = True
    return True

def check_ranking(a):
    """
    Returns a as a tuple of ints, raising InvalidRanking unless every index
    in [0, len(a)) appears exactly once
    """
    try:
        a = tuple(operator.index(v) for v in a)
    except TypeError:
        raise InvalidRanking("ranking entries must be integers") from None
    if not is_ranking(a):
        msg = "not a ranking"
        if len(a) < 20:
            msg += f": {list(a)}"
        raise InvalidRanking(msg)
    return a

class Ranking:
    """
    Immutable bijection on {0, ..., n-1}.

    Applying a ranking to a sequence moves the element at i to position self[i].
    """

    def __init__(self, ranking=()):
        self.ranking = check_ranking(ranking)

    @staticmethod
    def _trusted(ranking):
        # ranking is known to be a bijection
        result = Ranking.__new__(Ranking)
        result.ranking = tuple(ranking)
        return result

    @staticmethod
    def identity(n : int):
        if n < 0:
            raise ValueError(f"negative length {n}")
        return Ranking._trusted(range(n))

    @staticmethod
    def cycle(*cycle):
        """
        Cyclic ranking of length max(cycle) + 1 sending each index of the cycle
        to the next one. A single index n gives the identity of length n + 1.
        """
        if len(cycle) == 0:
            return Ranking()
        length = max(cycle) + 1
        moved = [False] * length
        for i in cycle:
            if i < 0:
                raise InvalidRanking(f"negative index {i} in cycle")
            if moved[i]:
                raise InvalidRanking(f"index {i} repeated in cycle")
            moved[i] = True
        ranking = list(range(length))
        for k, i in enumerate(cycle):
            ranking[i] = cycle[(k + 1) % len(cycle)]
        return Ranking._trusted(ranking)

    @staticmethod
    def cycle1(*cycle):
        # one-based cycle notation
        return Ranking.cycle(*(i - 1 for i in cycle))

    @staticmethod
    def swap(j : int, k : int):
        if j == k:
            raise InvalidRanking(f"swap of {j} with itself")
        return Ranking.cycle(j, k)

    @staticmethod
    def move(delete : int, insert : int):
        """
        Deletes the element at delete and reinserts it at insert:

            Ranking.move(0, 2).apply("12345") == "23145"
            Ranking.move(3, 1).apply("12345") == "14235"
        """
        return Ranking.cycle(*sequence(insert, delete, inclusive=True))

    @staticmethod
    def reverse(n : int):
        return Ranking._trusted([n - i - 1 for i in range(n)])

    @staticmethod
    def random(n : int, seed=None):
        rng = np.random.default_rng(seed)
        return Ranking._trusted(rng.permutation(n).tolist())

    @staticmethod
    def product(*rankings):
        """
        rankings[0] * rankings[1] * ..., the empty product being the identity of length 0
        """
        result = None
        for r in rankings:
            result = r if result is None else result.compose(r)
        return result if result is not None else Ranking()

    @staticmethod
    def sort(seq, key=None):
        """
        A ranking that sorts seq when applied to it, see SortAssigner
        """
        from libsym.sort_assigner import SortAssigner
        return SortAssigner(key=key).sort(seq)

    @staticmethod
    def taking(a, b, key=None):
        """
        A ranking r with r.apply(a) == b
        """
        from libsym.sort_assigner import SortAssigner
        return SortAssigner(key=key).taking(a, b)

    def length(self):
        return len(self.ranking)

    def __len__(self):
        return len(self.ranking)

    def __iter__(self):
        return iter(self.ranking)

    def __getitem__(self, i):
        return self.ranking[i]

    def __call__(self, i):
        if not isinstance(i, (int, np.integer)):
            raise TypeError(f"expected an index, got {type(i).__name__}")
        return self.apply(i)

    def apply(self, x):
        """
        Moves an index, or rearranges a sequence x so that result[self[i]] == x[i].

        Entries of x at positions len(self) and above stay where they are. The input
        is never modified; str, tuple and numpy arrays come back as the same type,
        anything else as a list.
        """
        n = len(self.ranking)
        if isinstance(x, (int, np.integer)):
            check_index(x, n)
            return self.ranking[x]
        check_length(n, len(x))
        if isinstance(x, np.ndarray):
            result = x.copy()
            result[self.to_numpy()] = x[:n]
            return result
        result = list(x)
        for i in range(n):
            result[self.ranking[i]] = x[i]
        if isinstance(x, str):
            return "".join(result)
        if isinstance(x, tuple):
            return tuple(result)
        return result

    def compose(self, other):
        """
        self.compose(other).apply(i) == self.apply(other.apply(i))
        """
        if len(self) != len(other):
            raise LengthMismatch(f"cannot compose rankings of length {len(self)} and {len(other)}")
        return Ranking._trusted([self.ranking[j] for j in other.ranking])

    def __mul__(self, other):
        return self.compose(other)

    def invert(self):
        # stable argsort of the one-line notation
        return Ranking._trusted(np.argsort(self.to_numpy(), kind="stable").tolist())

    def __invert__(self):
        return self.invert()

    def pad(self, length : int):
        """
        Extends this ranking by fixed points up to the given length
        """
        if length < len(self):
            raise LengthMismatch(f"cannot pad ranking of length {len(self)} to {length}")
        return Ranking._trusted(self.ranking + tuple(range(len(self), length)))

    def pow(self, k : int):
        if not isinstance(k, int):
            raise TypeError(f"exponent must be int, got {type(k).__name__}")
        if k < 0:
            return self.invert().pow(-k)
        res = Ranking.identity(len(self))
        exp = self
        # exponentiation by squaring
        while k > 0:
            if k % 2 == 0:
                exp = exp.compose(exp)
                k //= 2
            else:
                res = res.compose(exp)
                k -= 1
        return res

    def __pow__(self, k):
        return self.pow(k)

    def shift(self, n : int):
        """
        Acts like this ranking on the indices n, n+1, ... and fixes 0, ..., n-1
        """
        if n < 0:
            raise ValueError(f"negative shift {n}")
        return Ranking._trusted(tuple(range(n)) + tuple(v + n for v in self.ranking))

    def to_numpy(self):
        return np.asarray(self.ranking, dtype=np.intp)

    def is_identity(self):
        return all(v == i for i, v in enumerate(self.ranking))

    def reverses(self, n : int):
        if n < 0:
            raise ValueError(f"negative length {n}")
        if len(self) < n:
            return False
        return all(self.ranking[i] == len(self) - i - 1 for i in range(n))

    def sorts(self, seq, key=None):
        from libsym.sort_assigner import SortAssigner
        return SortAssigner(key=key).sorts(self, seq)

    def orbit(self, i : int):
        """
        Get the orbit i, self(i), self(self(i)), ... for which i is first
        """
        check_index(i, len(self))
        orbit = [i]
        k = self.ranking[i]
        while k != i:
            orbit.append(k)
            k = self.ranking[k]
        return orbit

    def cycles(self):
        """
        Get all non-trivial cycles, each starting at its smallest index
        """
        done = [False] * len(self)
        cycles = []
        for i in range(len(self)):
            if not done[i] and self.ranking[i] != i:
                orbit = self.orbit(i)
                for k in orbit:
                    done[k] = True
                cycles.append(tuple(orbit))
        return cycles

    def to_cycles(self):
        from libsym.cycles import Cycles
        return Cycles.of(self)

    def find_cycle(self):
        cycles = self.cycles()
        return cycles[0] if len(cycles) > 0 else None

    def is_cycle(self):
        # at most one non-trivial orbit
        return len(self.cycles()) <= 1

    def order(self):
        return math.lcm(*(len(cycle) for cycle in self.cycles()))

    def is_even(self):
        """
        Determines if this ranking is even
        """
        acc = sum(len(cycle) - 1 for cycle in self.cycles())
        return acc % 2 == 0

    def sign(self):
        return 1 if self.is_even() else -1

    def cycle_str(self):
        """
        Produces one-based cycle notation for this ranking
        """
        cycles = self.cycles()
        if len(cycles) > 0:
            return "(" + ")(".join([",".join([f"{e + 1}" for e in cyc]) for cyc in cycles]) + ")"
        return "(IDENT)"

    def __eq__(self, other):
        if not isinstance(other, Ranking):
            return False
        return self.ranking == other.ranking

    def __hash__(self):
        return hash(self.ranking)

    def __lt__(self, other):
        if not isinstance(other, Ranking):
            return NotImplemented
        return self.ranking < other.ranking

    def __str__(self):
        return str([v + 1 for v in self.ranking])

    def __repr__(self):
        return f"Ranking({list(self.ranking)})"

########################################################################################################################
#   Unit Tests
########################################################################################################################

import unittest
from itertools import permutations

from libsym.errors import IndexOutOfRange

def all_rankings(n):
    return [Ranking(p) for p in permutations(range(n))]

class TestRanking(unittest.TestCase):

    def test_identity(self):
        for n in range(6):
            e = Ranking.identity(n)
            self.assertEqual(len(e), n)
            self.assertTrue(e.is_identity())
            for i in range(n):
                self.assertEqual(e.apply(i), i)

    def test_validation(self):
        for bad in ([0, 0], [1, 2], [-1, 0], [0, 2], [0.5, 1]):
            with self.assertRaises(InvalidRanking):
                Ranking(bad)
        self.assertEqual(Ranking(np.array([1, 0])), Ranking([1, 0]))
        with self.assertRaises(TypeError):
            Ranking([0, 0], validate=False)

    def test_invalid_message(self):
        with self.assertRaisesRegex(InvalidRanking, r"\[1, 1\]"):
            Ranking([1, 1])

    def test_invert(self):
        for n in range(5):
            for p in all_rankings(n):
                self.assertEqual(p.invert().invert(), p)
                self.assertTrue(p.compose(p.invert()).is_identity())
                self.assertTrue(p.invert().compose(p).is_identity())
                self.assertEqual(p.compose(Ranking.identity(len(p))), p)
                for i in range(n):
                    self.assertEqual(p.invert().apply(p.apply(i)), i)

    def test_apply(self):
        arr = ["a", "b", "c", "d"]
        for p in all_rankings(4):
            result = p.apply(arr)
            for i in range(4):
                self.assertEqual(result[p.apply(i)], arr[i])
        self.assertEqual(arr, ["a", "b", "c", "d"])

    def test_apply_compose(self):
        arr = list(range(10, 14))
        for p in all_rankings(4)[::5]:
            for q in all_rankings(4)[::7]:
                self.assertEqual(p.compose(q).apply(arr), p.apply(q.apply(arr)))
                for i in range(4):
                    self.assertEqual((p * q)(i), p(q(i)))

    def test_apply_types(self):
        p = Ranking.cycle(0, 1, 2)
        self.assertEqual(p.apply("abc"), "cab")
        self.assertEqual(p.apply(("a", "b", "c")), ("c", "a", "b"))
        self.assertEqual(p.apply(np.array([1, 2, 3])).tolist(), [3, 1, 2])
        # tail passes through
        self.assertEqual(p.apply("abcde"), "cabde")

    def test_apply_errors(self):
        p = Ranking([2, 0, 1])
        with self.assertRaises(LengthMismatch):
            p.apply([1, 2])
        with self.assertRaises(IndexOutOfRange):
            p.apply(3)
        with self.assertRaises(IndexOutOfRange):
            p.apply(-1)
        with self.assertRaises(TypeError):
            p("a")

    def test_compose_length(self):
        with self.assertRaises(LengthMismatch):
            Ranking([1, 0]).compose(Ranking([0, 2, 1]))

    def test_equality(self):
        self.assertNotEqual(Ranking([0]), Ranking([0, 1]))
        self.assertEqual(Ranking([1, 0]), Ranking((1, 0)))
        self.assertEqual(hash(Ranking([1, 0])), hash(Ranking((1, 0))))
        self.assertEqual(len({Ranking([1, 0]), Ranking([1, 0]), Ranking([0, 1])}), 2)
        self.assertTrue(Ranking([0, 1]) < Ranking([1, 0]))
        self.assertEqual(sorted([Ranking([1, 0]), Ranking([0, 1])]), [Ranking([0, 1]), Ranking([1, 0])])
        with self.assertRaises(TypeError):
            Ranking([0, 1]) < (1, 0)

    def test_pad(self):
        self.assertEqual(Ranking([1, 0]).pad(4), Ranking([1, 0, 2, 3]))
        self.assertEqual(Ranking([1, 0]).pad(2), Ranking([1, 0]))
        with self.assertRaises(LengthMismatch):
            Ranking([1, 0]).pad(1)

    def test_pow(self):
        p = Ranking.random(9, seed=7)
        self.assertEqual(p.pow(0), Ranking.identity(9))
        self.assertEqual(p.pow(1), p)
        self.assertEqual(p ** 3, p * p * p)
        self.assertEqual(p.pow(-2), p.invert() * p.invert())
        self.assertTrue(p.pow(p.order()).is_identity())
        with self.assertRaises(TypeError):
            p.pow(1.5)

    def test_str(self):
        self.assertEqual(str(Ranking([2, 0, 1])), "[3, 1, 2]")
        self.assertEqual(repr(Ranking([2, 0, 1])), "Ranking([2, 0, 1])")
        self.assertEqual(Ranking([1, 0, 3, 2]).cycle_str(), "(1,2)(3,4)")
        self.assertEqual(Ranking.identity(3).cycle_str(), "(IDENT)")

    def test_cycle1(self):
        self.assertEqual(Ranking.cycle1(1, 2, 3).apply(["a", "b", "c"]), ["c", "a", "b"])
        self.assertEqual(Ranking.cycle(3), Ranking.identity(4))
        with self.assertRaises(InvalidRanking):
            Ranking.cycle(0, 1, 0)
        with self.assertRaises(InvalidRanking):
            Ranking.cycle(-1, 1)

    def test_move_reverse_swap(self):
        self.assertEqual(Ranking.move(0, 2).apply("12345"), "23145")
        self.assertEqual(Ranking.move(3, 1).apply("12345"), "14235")
        self.assertEqual(Ranking.move(2, 2), Ranking.identity(3))
        self.assertEqual(Ranking.reverse(5).apply("12345"), "54321")
        self.assertTrue(Ranking.reverse(5).reverses(5))
        self.assertFalse(Ranking.reverse(5).reverses(6))
        self.assertEqual(Ranking.swap(0, 2).apply("abc"), "cba")
        with self.assertRaises(InvalidRanking):
            Ranking.swap(1, 1)

    def test_shift(self):
        self.assertEqual(Ranking([1, 0]).shift(2), Ranking([0, 1, 3, 2]))
        p = Ranking.random(6, seed=3)
        for i in range(6):
            self.assertEqual(p.shift(3).apply(i + 3), p.apply(i) + 3)

    def test_orbits(self):
        p = Ranking([1, 2, 0, 4, 3, 5])
        self.assertEqual(p.orbit(1), [1, 2, 0])
        self.assertEqual(p.orbit(5), [5])
        self.assertEqual(p.cycles(), [(0, 1, 2), (3, 4)])
        self.assertEqual(p.order(), 6)
        self.assertFalse(p.is_cycle())
        self.assertTrue(Ranking.cycle(4, 1, 2).is_cycle())
        self.assertEqual(p.find_cycle(), (0, 1, 2))
        self.assertIsNone(Ranking.identity(3).find_cycle())
        self.assertEqual(Ranking.identity(3).order(), 1)

    def test_sign(self):
        self.assertEqual(Ranking.swap(0, 3).sign(), -1)
        self.assertEqual(Ranking.cycle(0, 1, 2).sign(), 1)
        for p in all_rankings(4):
            for q in all_rankings(4)[::3]:
                self.assertEqual((p * q).sign(), p.sign() * q.sign())

    def test_random(self):
        p = Ranking.random(50, seed=1)
        self.assertEqual(p, Ranking.random(50, seed=1))
        self.assertEqual(sorted(p), list(range(50)))

    def test_product(self):
        p, q, r = Ranking.random(5, seed=1), Ranking.random(5, seed=2), Ranking.random(5, seed=3)
        self.assertEqual(Ranking.product(p, q, r), p * q * r)
        self.assertEqual(Ranking.product(), Ranking())
