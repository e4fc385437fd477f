"""Round outcome classification and the session win counters."""

import logging
from dataclasses import dataclass
from enum import Enum

from core.hand import BLACKJACK

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """Result of a round, with its table message and sound cue."""

    DEALER_WINS_BY_PLAYER_BUST = ("Bust! The Dealer has won.", "lose")
    PLAYER_WINS = ("You have won!", "win")
    PLAYER_BLACKJACK = ("Blackjack!", "blackjack")
    DRAW = ("Draw!", "draw")
    DEALER_BUSTS_PLAYER_WINS = ("The dealer busts. You have won!", "win")
    DEALER_WINS = ("The Dealer has won!", "lose")

    def __init__(self, message: str, cue: str) -> None:
        self.message = message
        self.cue = cue

    @property
    def player_won(self) -> bool:
        """Check if this outcome counts as a player win."""
        return self in (
            Outcome.PLAYER_WINS,
            Outcome.PLAYER_BLACKJACK,
            Outcome.DEALER_BUSTS_PLAYER_WINS,
        )

    @property
    def dealer_won(self) -> bool:
        """Check if this outcome counts as a dealer win."""
        return self in (Outcome.DEALER_WINS, Outcome.DEALER_WINS_BY_PLAYER_BUST)

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


def classify(player_score: int, dealer_score: int) -> Outcome:
    """
    Classify a finished round from the two final scores.

    Rules are checked in order; the first that matches wins:
        1. player over 21
        2. player under 21 and above the dealer
        3. player exactly 21 and above the dealer
        4. equal scores
        5. dealer over 21
        6. dealer ahead
    """
    if player_score > BLACKJACK:
        return Outcome.DEALER_WINS_BY_PLAYER_BUST
    if player_score > dealer_score and player_score < BLACKJACK:
        return Outcome.PLAYER_WINS
    if player_score == BLACKJACK and player_score > dealer_score:
        return Outcome.PLAYER_BLACKJACK
    if player_score == dealer_score:
        return Outcome.DRAW
    if dealer_score > BLACKJACK:
        return Outcome.DEALER_BUSTS_PLAYER_WINS
    return Outcome.DEALER_WINS


@dataclass
class SessionScores:
    """Running win counters for one play session."""

    player_wins: int = 0
    dealer_wins: int = 0

    def record(self, outcome: Outcome) -> None:
        """Credit the winner of ``outcome``; a draw changes nothing."""
        if outcome.player_won:
            self.player_wins += 1
        elif outcome.dealer_won:
            self.dealer_wins += 1

    def reset(self) -> None:
        """Zero both counters."""
        self.player_wins = 0
        self.dealer_wins = 0

    @property
    def player_label(self) -> str:
        return f"You: {self.player_wins}"

    @property
    def dealer_label(self) -> str:
        return f"Dealer: {self.dealer_wins}"

    def as_tuple(self) -> tuple[int, int]:
        """Return ``(player_wins, dealer_wins)``."""
        return self.player_wins, self.dealer_wins


def resolve(player_score: int, dealer_score: int, scores: SessionScores) -> Outcome:
    """Classify the round and update the session counters."""
    outcome = classify(player_score, dealer_score)
    scores.record(outcome)
    logger.info(
        "Round resolved: player %d, dealer %d -> %s (%s, %s)",
        player_score,
        dealer_score,
        outcome.name,
        scores.player_label,
        scores.dealer_label,
    )
    return outcome
