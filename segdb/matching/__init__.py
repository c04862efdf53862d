# ==============================================
# TOPIC 1: MATCHING
# ==============================================
#
# Keeps track of which segment ids represent the same
# real-world object. Matches are transitive, so ids are kept
# in disjoint equivalence groups.
#
# Modules:
# --------
# - id_matches.py → IdMatches (groups, add/find/query, text form)
#
# ==============================================

from .id_matches import IdMatches, Position

__all__ = ["IdMatches", "Position"]
