"""Round engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import RoundState
from core.game.outcome import Outcome, SessionScores, classify, resolve
from core.game.dealing import ActionGuard, CardDealer
from core.game.engine import BlackjackTable

__all__ = [
    "GameEvent",
    "EventType",
    "RoundState",
    "Outcome",
    "SessionScores",
    "classify",
    "resolve",
    "ActionGuard",
    "CardDealer",
    "BlackjackTable",
]
