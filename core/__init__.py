"""Core blackjack table engine - 100% UI-agnostic."""

from core.cards import Card, Shoe, Rank, Suit
from core.exceptions import BlackjackError, ExhaustedShoeError, InvalidActionError
from core.hand import Hand, Participant, evaluate

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "Participant",
    "evaluate",
    "BlackjackError",
    "ExhaustedShoeError",
    "InvalidActionError",
]
