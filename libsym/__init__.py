#!/usr/bin/env python3
#
#   libsym: rankings, cycles and sorted lookup lists
#

from libsym.errors import (RankingError, InvalidRanking, LengthMismatch, NullElement, DuplicateRejected,
                           NotARearrangement, IndexOutOfRange, SlotExhausted)
from libsym.ranking import Ranking, is_ranking
from libsym.sort_assigner import SortAssigner, sort_ranking
from libsym.lookup_list import LookupList
from libsym.cycles import Cycles, orbit, to_cycles, from_cycles, to_transpositions

__version__ = "0.1.0"
