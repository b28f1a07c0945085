"""Tests for photoflow.core.shuffle."""

import random

import pytest

from photoflow.core.shuffle import IncrementalShuffle


def _shuffle(seed=7):
    return IncrementalShuffle(random.Random(seed))


def test_empty_shuffle():
    shuffle = _shuffle()
    assert len(shuffle) == 0
    assert shuffle.current is None
    assert shuffle.at_end
    assert shuffle.advance() is None
    assert shuffle.reshuffle() is None


@pytest.mark.parametrize("count", [1, 2, 10, 257])
def test_initialize_is_a_permutation(count):
    shuffle = _shuffle()
    shuffle.initialize(count)
    assert sorted(shuffle.order) == list(range(count))
    assert shuffle.position == 0


@pytest.mark.parametrize("pinned", [0, 3, 9])
def test_initialize_keeps_pinned_first(pinned):
    for seed in range(20):
        shuffle = _shuffle(seed)
        shuffle.initialize(10, pinned=pinned)
        assert shuffle.current == pinned


def test_advance_walks_order_then_stops():
    shuffle = _shuffle()
    shuffle.initialize(5)
    seen = [shuffle.current]
    index = shuffle.advance()
    while index is not None:
        seen.append(index)
        index = shuffle.advance()
    assert seen == list(shuffle.order)
    assert shuffle.at_end


def test_extend_never_moves_played_entries():
    for seed in range(25):
        shuffle = _shuffle(seed)
        shuffle.initialize(6)
        shuffle.advance()
        shuffle.advance()
        played = shuffle.order[: shuffle.position + 1]
        shuffle.extend(20)
        assert shuffle.order[: shuffle.position + 1] == played
        assert sorted(shuffle.order) == list(range(20))


def test_extended_items_are_still_ahead():
    shuffle = _shuffle()
    shuffle.initialize(3)
    shuffle.advance()
    shuffle.advance()
    assert shuffle.at_end
    shuffle.extend(5)
    assert not shuffle.at_end
    upcoming = set()
    index = shuffle.advance()
    while index is not None:
        upcoming.add(index)
        index = shuffle.advance()
    assert upcoming == {3, 4}


def test_extend_with_smaller_count_is_noop():
    shuffle = _shuffle()
    shuffle.initialize(4)
    before = shuffle.order
    shuffle.extend(2)
    assert shuffle.order == before


def test_reshuffle_avoids_repeating_current():
    for seed in range(50):
        shuffle = _shuffle(seed)
        shuffle.initialize(4)
        first = shuffle.reshuffle(avoid_first=2)
        assert first != 2
        assert shuffle.position == 0
        assert sorted(shuffle.order) == [0, 1, 2, 3]


def test_reshuffle_single_item():
    shuffle = _shuffle()
    shuffle.initialize(1)
    assert shuffle.reshuffle(avoid_first=0) == 0


def test_locate_and_move_to():
    shuffle = _shuffle()
    shuffle.initialize(5, pinned=4)
    assert shuffle.locate(4) == 0
    assert shuffle.locate(99) is None
    shuffle.move_to(3)
    assert shuffle.position == 3
    shuffle.move_to(100)
    assert shuffle.position == 4
    shuffle.move_to(-1)
    assert shuffle.position == 0


def test_clear():
    shuffle = _shuffle()
    shuffle.initialize(3)
    shuffle.advance()
    shuffle.clear()
    assert shuffle.order == ()
    assert shuffle.position == 0
