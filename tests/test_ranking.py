"""
Medal positions with ties: position = 1 + number of strictly better entries, and everyone
whose position is within the top 3 is kept (including ties at the boundary).
"""

from fanstatsengine.core.ranking import RankedEntry, competition_positions, top_positions


def _entries(values, prefix="P"):
    return [RankedEntry(f"{prefix}{i}", f"T{i}", v, str(v)) for i, v in enumerate(values)]


def _values(entries):
    return [e.value for e in entries]


# --- canonical tie cases ---
def test_two_way_ties_cut_before_fifth_place():
    top = top_positions(_entries([8, 8, 6, 6, 5, 5, 5]))
    assert _values(top) == [8, 8, 6, 6]


def test_descending_losses_keep_top_two_tied_pairs():
    # 5s share 1st, 4s share 3rd, the 3s are 5th
    top = top_positions(_entries([5, 5, 4, 4, 3, 3, 3, 3]))
    assert _values(top) == [5, 5, 4, 4]


def test_ascending_keeps_tied_third_place():
    # positions 1,1,3,3 for the 3s; the 4s are 5th, the 5s 7th
    top = top_positions(_entries([5, 5, 4, 4, 3, 3, 3, 3]), higher_is_better=False)
    assert _values(top) == [3, 3, 3, 3]


def test_tie_at_third_position_is_kept_whole():
    top = top_positions(_entries([9, 8, 7, 7, 7, 6]))
    assert _values(top) == [9, 8, 7, 7, 7]


def test_three_way_tie_for_first_excludes_fourth_entry():
    top = top_positions(_entries([9, 9, 9, 8]))
    assert _values(top) == [9, 9, 9]


def test_tie_for_second_keeps_all_tied():
    top = top_positions(_entries([9, 8, 8, 8]))
    assert _values(top) == [9, 8, 8, 8]


# --- small inputs ---
def test_three_or_fewer_entries_all_returned_sorted():
    assert _values(top_positions(_entries([1, 3, 2]))) == [3, 2, 1]
    assert _values(top_positions(_entries([2]))) == [2]


def test_empty_in_empty_out():
    assert top_positions([]) == []


# --- positions and eps ---
def test_competition_positions_skip_after_ties():
    pos = [p for p, _ in competition_positions(_entries([10, 10, 7, 5, 5, 1]))]
    assert pos == [1, 1, 3, 4, 4, 6]


def test_values_within_eps_are_tied():
    top = top_positions(_entries([1.0, 1.0 + 1e-12, 0.5, 0.25]))
    pos = [p for p, _ in competition_positions(top)]
    assert pos[:2] == [1, 1]


def test_stable_order_among_equal_values():
    entries = _entries([5, 5, 5], prefix="F")
    assert [e.participant for e in top_positions(entries)] == ["F0", "F1", "F2"]


def test_to_dict_includes_detail_only_when_present():
    plain = RankedEntry("Dan R.", "Toronto", 3, "3 wins")
    assert plain.to_dict() == {"participant": "Dan R.", "team": "Toronto", "value": 3, "display": "3 wins"}
    rich = RankedEntry("Dan R.", "Toronto", 3, "3 wins", detail={"wins": 3})
    assert rich.to_dict()["detail"] == {"wins": 3}
