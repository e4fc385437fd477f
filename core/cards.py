"""Card, Deck, and Shoe classes - immutable card representations."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable

from core.exceptions import ExhaustedShoeError


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks, Ace low."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the base point value (Ace = 1, face cards = 10)."""
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the base point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            "A": Rank.ACE,
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
        }

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def standard_deck() -> list[Card]:
    """Return the 52 cards of a standard deck, in order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Shoe:
    """
    Card supply split into three piles.

    The draw pile's top card is at index 0. Cards dealt into a hand stay
    tracked in the in-use pile until the next round moves them to discard.
    """

    def __init__(
        self,
        num_decks: int = 1,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a shoe with multiple decks.

        Args:
            num_decks: Number of decks in the shoe
            rng: Random number generator for shuffling
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._rng = rng or Random()
        self._draw_pile: list[Card] = []
        self._discard_pile: list[Card] = []
        self._in_use_pile: list[Card] = []
        self.reset()

    @classmethod
    def stacked(cls, cards: Iterable[Card], rng: Random | None = None) -> "Shoe":
        """Build a shoe whose draw pile deals ``cards`` in the given order."""
        shoe = cls(rng=rng)
        shoe._draw_pile = list(cards)
        return shoe

    def reset(self) -> None:
        """Gather every card back into an ordered draw pile."""
        self._draw_pile = [card for _ in range(self._num_decks) for card in standard_deck()]
        self._discard_pile = []
        self._in_use_pile = []

    def shuffle_draw_pile(self) -> None:
        """Randomize the draw pile order."""
        self._rng.shuffle(self._draw_pile)

    def shuffle_together(self) -> None:
        """Merge the discard pile into the draw pile and shuffle."""
        self._draw_pile.extend(self._discard_pile)
        self._discard_pile.clear()
        self.shuffle_draw_pile()

    @property
    def top_card(self) -> Card:
        """Return the next card to be dealt without moving it."""
        if not self._draw_pile:
            raise ExhaustedShoeError("Cannot read from an empty draw pile")
        return self._draw_pile[0]

    def move_top_card_to_in_use(self) -> Card:
        """Move the top card of the draw pile to the in-use pile."""
        if not self._draw_pile:
            raise ExhaustedShoeError("Cannot draw from an empty draw pile")
        card = self._draw_pile.pop(0)
        self._in_use_pile.append(card)
        return card

    def move_all_in_use_to_discard(self) -> None:
        """Return every in-use card to the discard pile."""
        self._discard_pile.extend(self._in_use_pile)
        self._in_use_pile.clear()

    @property
    def draw_pile_size(self) -> int:
        """Return the number of cards left to draw."""
        return len(self._draw_pile)

    @property
    def discard_pile_size(self) -> int:
        """Return the number of discarded cards."""
        return len(self._discard_pile)

    @property
    def in_use_pile_size(self) -> int:
        """Return the number of cards currently in hands."""
        return len(self._in_use_pile)

    @property
    def total_cards(self) -> int:
        """Return the number of cards across all piles."""
        return self.draw_pile_size + self.discard_pile_size + self.in_use_pile_size

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks
