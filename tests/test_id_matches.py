# ==============================================
# Tests for IdMatches
# ==============================================
#
# Group creation, growth and merging, queries, and the text form.
# ==============================================

import pytest

from segdb.errors import IdentityMatchError
from segdb.matching import IdMatches, Position


# ==============================================
# add_match
# ==============================================

class TestAddMatch:

    def test_new_ids_create_two_member_group(self):
        matches = IdMatches()
        matches.add_match(1, 2)
        assert matches.groups() == [[1, 2]]
        assert matches.size() == 1

    def test_new_group_is_appended(self):
        matches = IdMatches()
        matches.add_match(1, 2)
        matches.add_match(10, 20)
        assert matches.groups() == [[1, 2], [10, 20]]

    def test_unknown_id_joins_existing_group(self):
        matches = IdMatches()
        matches.add_match(1, 2)
        matches.add_match(2, 3)
        matches.add_match(4, 1)
        assert matches.groups() == [[1, 2, 3, 4]]

    def test_same_group_is_noop(self):
        matches = IdMatches()
        matches.add_match(1, 2)
        matches.add_match(2, 3)
        matches.add_match(3, 1)
        assert matches.groups() == [[1, 2, 3]]

    def test_adding_twice_is_idempotent(self):
        once = IdMatches()
        once.add_match(5, 6)
        twice = IdMatches()
        twice.add_match(5, 6)
        twice.add_match(5, 6)
        assert once == twice

    def test_merge_prepends_second_group(self):
        """{1,2} + {3,4} via 2-3 gives [3, 4, 1, 2]."""
        matches = IdMatches()
        matches.add_match(1, 2)
        matches.add_match(3, 4)
        matches.add_match(2, 3)
        assert matches.groups() == [[3, 4, 1, 2]]
        assert sorted(matches.at(0)) == [1, 2, 3, 4]

    def test_merge_when_second_group_comes_first(self):
        matches = IdMatches()
        matches.add_match(1, 2)
        matches.add_match(3, 4)
        matches.add_match(5, 6)
        matches.add_match(6, 1)
        assert matches.groups() == [[3, 4], [1, 2, 5, 6]]

    def test_identical_ids_raise(self):
        matches = IdMatches([[1, 2]])
        with pytest.raises(IdentityMatchError):
            matches.add_match(3, 3)
        assert matches.groups() == [[1, 2]]

    def test_identity_error_is_value_error(self):
        with pytest.raises(ValueError):
            IdMatches().add_match(0, 0)

    def test_partition_invariant(self):
        pairs = [(1, 2), (3, 4), (5, 1), (6, 7), (4, 6), (8, 9), (2, 8), (10, 11), (3, 7)]
        matches = IdMatches()
        for id1, id2 in pairs:
            matches.add_match(id1, id2)

        seen = []
        for group in matches:
            assert len(group) >= 2
            seen.extend(group)
        assert len(seen) == len(set(seen))
        assert set(seen) == {i for pair in pairs for i in pair}


# ==============================================
# Queries
# ==============================================

class TestQueries:

    def test_transitivity(self):
        matches = IdMatches()
        matches.add_match(1, 2)
        matches.add_match(2, 3)
        assert matches.are_ids_matching(1, 3)
        assert matches.are_ids_matching(3, 1)

    def test_not_matching_across_groups(self):
        matches = IdMatches([[1, 2], [3, 4]])
        assert not matches.are_ids_matching(1, 3)

    def test_not_matching_when_absent(self):
        matches = IdMatches([[1, 2]])
        assert not matches.are_ids_matching(1, 99)
        assert not matches.are_ids_matching(99, 1)
        assert not matches.are_ids_matching(98, 99)

    def test_find_matches_excludes_self(self):
        matches = IdMatches()
        matches.add_match(1, 2)
        matches.add_match(1, 3)
        assert matches.find_matches(2) == [1, 3]
        assert matches.find_matches(1) == [2, 3]

    def test_find_matches_returns_copy(self):
        matches = IdMatches([[1, 2, 3]])
        found = matches.find_matches(1)
        found.append(42)
        assert matches.groups() == [[1, 2, 3]]

    def test_find_matches_unknown_id(self):
        assert IdMatches([[1, 2]]).find_matches(5) is None

    def test_find_id_position(self):
        matches = IdMatches([[1, 2], [3, 4, 5]])
        assert matches.find_id(5) == Position(row=1, col=2)
        assert matches.find_id(6) is None


# ==============================================
# Size, access, serialization
# ==============================================

class TestAccessAndText:

    def test_size_counts_groups(self, id_matches):
        assert id_matches.size() == 2
        assert len(id_matches) == 2
        assert id_matches.id_count() == 5

    def test_empty_and_clear(self, id_matches):
        assert not id_matches.empty()
        id_matches.clear()
        assert id_matches.empty()
        assert not id_matches

    def test_at_returns_copy(self, id_matches):
        group = id_matches.at(0)
        group.append(9)
        assert id_matches.at(0) == [1, 2]

    def test_as_string(self, id_matches):
        assert id_matches.as_string() == "1 2 \n3 4 5 \n"
        assert str(id_matches) == id_matches.as_string()

    def test_as_string_empty(self):
        assert IdMatches().as_string() == ""

    def test_set_groups_replaces(self, id_matches):
        id_matches.set_groups([[8, 9]])
        assert id_matches.groups() == [[8, 9]]


# ==============================================
# Adopting existing groups
# ==============================================

class TestGroupValidation:

    @pytest.mark.parametrize("groups", [
        [[1, 2], [2, 3]],
        [[4]],
        [[1, 1]],
    ])
    def test_constructor_rejects_inconsistent_groups(self, groups):
        with pytest.raises(ValueError, match="Inconsistent match groups"):
            IdMatches(groups)

    def test_set_groups_rejects_and_keeps_current(self, id_matches):
        with pytest.raises(ValueError):
            id_matches.set_groups([[1, 1, 2]])
        assert id_matches.groups() == [[1, 2], [3, 4, 5]]

    def test_check_groups_messages(self):
        problems = IdMatches.check_groups([[1, 2], [2, 3], [4], [5, 5, 6]])
        assert problems == [
            "id 2 appears in more than one group",
            "group 2 has fewer than 2 distinct ids",
            "group 3 repeats an id",
        ]

    def test_check_groups_accepts_valid_groups(self):
        assert IdMatches.check_groups([[1, 2], [3, 4, 5]]) == []
