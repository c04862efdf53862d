# ==============================================
# IdMatches
# ==============================================
#
# PURPOSE:
#   Holds groups of segment ids that were asserted to match.
#   Every id appears in at most one group, groups always have at
#   least two members, and matching is transitive: adding 1-2 and
#   2-3 puts 1, 2 and 3 in the same group.
#
# ORDER MATTERS:
#   Group order and member order are observable through as_string()
#   and the matches file, so they follow fixed rules:
#     - a new group is appended to the end of the sequence
#     - a new id joining a group is appended to that group
#     - when two groups merge, the group of id2 is removed and its
#       members are prepended to the group of id1
#
# CLASS: IdMatches
# ----------------
#   Methods:
#   --------
#   - add_match(id1, id2) -> None
#   - find_matches(id) -> list[int] | None
#   - are_ids_matching(id1, id2) -> bool
#   - clear() -> None
#   - set_groups(groups) -> None      (rejects inconsistent groups)
#   - check_groups(groups) -> list[str]
#   - as_string() -> str
#   - size() / empty() / at(i) / groups() / id_count()
#
#   Lookup is a linear scan over all groups. Sessions hold a few
#   thousand segments at most.
#
# ==============================================

from typing import Iterable, Iterator, List, NamedTuple, Optional

from segdb.errors import IdentityMatchError


class Position(NamedTuple):
    """Location of an id: group index (row) and index within the group (col)."""
    row: int
    col: int


class IdMatches:
    """Disjoint groups of mutually matching segment ids."""

    def __init__(self, groups: Optional[Iterable[Iterable[int]]] = None):
        """
        Args:
            groups: Initial groups, kept in the given order.

        Raises:
            ValueError: If the groups overlap, repeat an id, or have
                fewer than two members (see check_groups()).
        """
        self._groups: List[List[int]] = []
        if groups:
            self.set_groups(groups)

    # ======================================
    # Matching
    # ======================================
    def add_match(self, id1: int, id2: int) -> None:
        """
        Assert that id1 and id2 represent the same object.

        Raises:
            IdentityMatchError: If id1 == id2.
        """
        if id1 == id2:
            raise IdentityMatchError(id1)

        position1 = self.find_id(id1)
        position2 = self.find_id(id2)

        if position1 is None and position2 is None:
            self._groups.append([id1, id2])
        elif position2 is None:
            self._groups[position1.row].append(id2)
        elif position1 is None:
            self._groups[position2.row].append(id1)
        elif position1.row != position2.row:
            merged = self._groups.pop(position2.row)
            # Removing row2 shifts every later row up by one
            row1 = position1.row - 1 if position2.row < position1.row else position1.row
            self._groups[row1][:0] = merged
        # Both already in the same group: nothing to do

    def find_matches(self, segment_id: int) -> Optional[List[int]]:
        """
        Return the ids matching segment_id.

        Returns:
            A copy of segment_id's group without segment_id itself,
            or None if segment_id is in no group.
        """
        position = self.find_id(segment_id)
        if position is None:
            return None
        matches = list(self._groups[position.row])
        del matches[position.col]
        return matches

    def are_ids_matching(self, id1: int, id2: int) -> bool:
        position1 = self.find_id(id1)
        if position1 is None:
            return False
        position2 = self.find_id(id2)
        if position2 is None:
            return False
        return position1.row == position2.row

    def find_id(self, segment_id: int) -> Optional[Position]:
        """Locate an id, or return None when it is in no group."""
        for row, group in enumerate(self._groups):
            for col, member in enumerate(group):
                if member == segment_id:
                    return Position(row, col)
        return None

    def clear(self) -> None:
        self._groups.clear()

    def set_groups(self, groups: Iterable[Iterable[int]]) -> None:
        """
        Replace all groups with the given ones, kept in the given order.

        Raises:
            ValueError: If the groups break the store's invariants.
                The current groups are left unchanged.
        """
        new_groups = [list(group) for group in groups]
        problems = self.check_groups(new_groups)
        if problems:
            raise ValueError(f"Inconsistent match groups: {'; '.join(problems)}")
        self._groups = new_groups

    @staticmethod
    def check_groups(groups: List[List[int]]) -> List[str]:
        """
        List the ways groups break the store's invariants.

        Returns:
            One message per problem (overlapping groups, repeated ids,
            groups with fewer than two distinct ids). Empty if none.
        """
        problems = []
        seen = set()
        for row, group in enumerate(groups):
            members = set(group)
            if len(members) < 2:
                problems.append(f"group {row} has fewer than 2 distinct ids")
            if len(members) != len(group):
                problems.append(f"group {row} repeats an id")
            for segment_id in sorted(members & seen):
                problems.append(f"id {segment_id} appears in more than one group")
            seen |= members
        return problems

    # ======================================
    # Access
    # ======================================
    def size(self) -> int:
        """Number of groups (not number of ids)."""
        return len(self._groups)

    def empty(self) -> bool:
        return not self._groups

    def at(self, index: int) -> List[int]:
        """Copy of the group at the given position."""
        return list(self._groups[index])

    def groups(self) -> List[List[int]]:
        return [list(group) for group in self._groups]

    def id_count(self) -> int:
        return sum(len(group) for group in self._groups)

    # ======================================
    # Serialization
    # ======================================
    def as_string(self) -> str:
        """
        Text form: one line per group, every id followed by a space.

        Example:
            [[1, 2], [3, 4, 5]] -> "1 2 \\n3 4 5 \\n"
        """
        return "".join(
            "".join(f"{segment_id} " for segment_id in group) + "\n"
            for group in self._groups
        )

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[List[int]]:
        return iter(self.groups())

    def __eq__(self, other) -> bool:
        if isinstance(other, IdMatches):
            return self._groups == other._groups
        return NotImplemented

    def __repr__(self) -> str:
        return f"IdMatches({self._groups!r})"

    def __str__(self) -> str:
        return self.as_string()
