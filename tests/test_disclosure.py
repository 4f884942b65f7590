"""Tests for frost_journey.disclosure — artifact counter and phrase dismissal set."""

import pytest

from frost_journey.disclosure import DisclosureCounter, DismissalSet


class TestDisclosureCounter:
    def test_twelve_advances_reach_total(self) -> None:
        counter = DisclosureCounter(total=12)
        assert all(counter.advance() for _ in range(12))
        assert counter.shown == counter.total == 12
        assert counter.exhausted

    def test_thirteenth_advance_signals_exhausted(self) -> None:
        counter = DisclosureCounter(total=12)
        for _ in range(12):
            counter.advance()
        assert counter.advance() is False
        assert counter.shown == 12

    def test_declared_initial_value(self) -> None:
        counter = DisclosureCounter(total=12, initial=2)
        assert counter.shown == 2
        for _ in range(10):
            counter.advance()
        assert counter.exhausted
        counter.reset()
        assert counter.shown == 2

    def test_state_model(self) -> None:
        counter = DisclosureCounter(total=3)
        counter.advance()
        state = counter.state()
        assert (state.shown, state.total) == (1, 3)
        assert not state.exhausted

    @pytest.mark.parametrize("total,initial", [(-1, 0), (3, 4), (3, -1)])
    def test_invalid_bounds_rejected(self, total, initial) -> None:
        with pytest.raises(ValueError):
            DisclosureCounter(total=total, initial=initial)


class TestDismissalSet:
    def test_all_seven_completes(self) -> None:
        phrases = DismissalSet(total=7)
        results = [phrases.dismiss(i) for i in (6, 0, 3, 1, 5, 2, 4)]
        assert results == [False] * 6 + [True]
        assert phrases.complete

    def test_six_distinct_do_not_complete(self) -> None:
        phrases = DismissalSet(total=7)
        for i in range(6):
            phrases.dismiss(i)
        assert not phrases.complete

    def test_duplicates_are_idempotent(self) -> None:
        phrases = DismissalSet(total=7)
        for i in (0, 0, 1, 1, 2, 2, 3, 4, 5, 5, 5):
            phrases.dismiss(i)
        assert phrases.dismissed == frozenset({0, 1, 2, 3, 4, 5})
        assert not phrases.complete
        assert phrases.dismiss(6)

    @pytest.mark.parametrize("index", [-1, 7, 100])
    def test_out_of_range_index_raises(self, index) -> None:
        phrases = DismissalSet(total=7)
        with pytest.raises(IndexError):
            phrases.dismiss(index)
        assert phrases.dismissed == frozenset()

    def test_reset_empties_set(self) -> None:
        phrases = DismissalSet(total=2)
        phrases.dismiss(0)
        phrases.dismiss(1)
        phrases.reset()
        assert phrases.state().dismissed == []
        assert not phrases.complete
