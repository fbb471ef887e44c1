#!/usr/bin/env python3
#
#   Error taxonomy
#

class RankingError(Exception):
    """
    Base class of every error raised by libsym
    """

class InvalidRanking(RankingError, ValueError):
    """
    The supplied index sequence is not a bijection on {0, ..., n-1}
    """

class LengthMismatch(RankingError, ValueError):
    pass

class NullElement(RankingError, ValueError):
    pass

class DuplicateRejected(RankingError, ValueError):
    pass

class NotARearrangement(RankingError, ValueError):
    pass

class IndexOutOfRange(RankingError, IndexError):
    pass

class SlotExhausted(RankingError, AssertionError):
    """
    No free sorted slot left for an element. Never raised for well-formed input.
    """

########################################################################################################################
#   Unit Tests
########################################################################################################################

import unittest

class TestErrors(unittest.TestCase):

    def test_builtin_bases(self):
        self.assertTrue(issubclass(InvalidRanking, ValueError))
        self.assertTrue(issubclass(LengthMismatch, ValueError))
        self.assertTrue(issubclass(IndexOutOfRange, IndexError))
        self.assertTrue(issubclass(SlotExhausted, AssertionError))

    def test_common_base(self):
        for err in (InvalidRanking, LengthMismatch, NullElement, DuplicateRejected,
                    NotARearrangement, IndexOutOfRange, SlotExhausted):
            self.assertTrue(issubclass(err, RankingError), err)
