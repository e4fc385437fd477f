"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from config import TableConfig, TimingConfig
from core.cards import Card, Shoe
from core.game import BlackjackTable, SessionScores
from core.hand import Hand, Participant


class KeepOrder(Random):
    """Random whose shuffle leaves the sequence untouched."""

    def shuffle(self, x) -> None:  # type: ignore[override]
        pass


def _cards(*codes: str) -> list[Card]:
    return [Card.from_string(s) for s in codes]


@pytest.fixture
def cards():
    """Factory building cards from strings like 'AS', '10H', 'KD'."""
    return _cards


@pytest.fixture
def make_hand():
    """Factory building a hand holding the given cards, all face up."""

    def _make(*codes: str, owner: Participant = Participant.PLAYER) -> Hand:
        hand = Hand(owner)
        for card in _cards(*codes):
            hand.add_card(card)
        return hand

    return _make


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled single-deck shoe."""
    s = Shoe(num_decks=1, rng=rng)
    s.shuffle_draw_pile()
    return s


@pytest.fixture
def stacked_shoe():
    """Factory for a shoe that deals the given cards in order and never reorders."""

    def _make(*codes: str) -> Shoe:
        return Shoe.stacked(_cards(*codes), rng=KeepOrder())

    return _make


@pytest.fixture
def instant():
    """Zero-duration pacing."""
    return TimingConfig.instant()


@pytest.fixture
def table_config():
    """Default table settings, single deck."""
    return TableConfig(num_decks=1)


@pytest.fixture
def scores():
    """Fresh session counters."""
    return SessionScores()


@pytest.fixture
def stacked_table(stacked_shoe, instant, table_config, scores):
    """
    Factory for a table whose shoe deals the given cards in order.

    The initial deal goes dealer, player, dealer, player; later cards
    feed hits and dealer draws.
    """

    def _make(*codes: str) -> BlackjackTable:
        return BlackjackTable(
            shoe=stacked_shoe(*codes),
            scores=scores,
            timing=instant,
            table_config=table_config,
        )

    return _make


@pytest.fixture
def table(rng, instant, table_config):
    """A new table with a seeded single-deck shoe."""
    return BlackjackTable(timing=instant, table_config=table_config, rng=rng)
