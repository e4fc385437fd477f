"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from core.cards import Card

BLACKJACK = 21


class Participant(Enum):
    """Who a hand belongs to."""

    DEALER = "dealer"
    PLAYER = "player"

    def __str__(self) -> str:
        return self.value


def evaluate(cards: Iterable[Card]) -> int:
    """
    Calculate the best score for a sequence of cards.

    Every card counts its base value (Ace = 1). If the hand holds an Ace and
    promoting one Ace to 11 keeps the total at 21 or below, exactly one Ace
    is promoted. An empty hand scores 0.
    """
    total = 0
    has_ace = False

    for card in cards:
        total += card.value
        if card.is_ace:
            has_ace = True

    if has_ace and (total - 1) + 11 <= BLACKJACK:
        total += 10

    return total


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    owner: Participant
    cards: list[Card] = field(default_factory=list)
    hidden: set[int] = field(default_factory=set)

    def add_card(self, card: Card, face_up: bool = True) -> int:
        """Add a card to the hand and return its position."""
        self.cards.append(card)
        position = len(self.cards) - 1
        if not face_up:
            self.hidden.add(position)
        return position

    def reveal_all(self) -> list[Card]:
        """Turn every face-down card up and return the revealed cards."""
        revealed = [self.cards[i] for i in sorted(self.hidden)]
        self.hidden.clear()
        return revealed

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()
        self.hidden.clear()

    def is_hidden(self, position: int) -> bool:
        """Check if the card at ``position`` is face down."""
        return position in self.hidden

    @property
    def value(self) -> int:
        """The true score, always computed from every card held."""
        return evaluate(self.cards)

    @property
    def displayed_value(self) -> int:
        """
        The score an observer of the table can see.

        While any card is face down only the base values of the face-up cards
        count. The dealer's lone up card also shows its base value, since its
        hole card is still to come. Otherwise this is the true score.
        """
        if not self.hidden and not self.awaiting_hole_card:
            return self.value
        return sum(card.value for card in self.visible_cards)

    @property
    def awaiting_hole_card(self) -> bool:
        """Check if this is a dealer hand holding only its up card."""
        return self.owner is Participant.DEALER and len(self.cards) == 1

    @property
    def visible_cards(self) -> list[Card]:
        """Return the face-up cards in deal order."""
        return [card for i, card in enumerate(self.cards) if i not in self.hidden]

    @property
    def is_soft(self) -> bool:
        """Check if an Ace is currently counted as 11."""
        return any(card.is_ace for card in self.cards) and self.value != sum(
            card.value for card in self.cards
        )

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK

    @property
    def num_cards(self) -> int:
        """Return the number of cards in the hand."""
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(
            "??" if i in self.hidden else str(card) for i, card in enumerate(self.cards)
        )
        value_str = f"({self.displayed_value})"
        if not self.hidden and self.is_soft:
            value_str = f"(soft {self.value})"
        if not self.hidden and self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.owner.name}, {self.cards!r}, value={self.value})"
