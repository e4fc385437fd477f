"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: SETUP → DEALING_INITIAL → PLAYER_TURN → DEALER_TURN → RESOLVED → SETUP
    """

    # Hands cleared, waiting for the deal to begin
    SETUP = auto()

    # Two cards each being dealt
    DEALING_INITIAL = auto()

    # Player may hit or stand
    PLAYER_TURN = auto()

    # Hole card revealed, dealer draws to 17
    DEALER_TURN = auto()

    # Outcome decided, waiting for play again
    RESOLVED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[RoundState, list[RoundState]] = {
    RoundState.SETUP: [RoundState.DEALING_INITIAL],
    RoundState.DEALING_INITIAL: [RoundState.PLAYER_TURN, RoundState.DEALER_TURN],  # DEALER_TURN on a dealt 21
    RoundState.PLAYER_TURN: [RoundState.DEALER_TURN],
    RoundState.DEALER_TURN: [RoundState.RESOLVED],
    RoundState.RESOLVED: [RoundState.SETUP],
}


def is_valid_transition(from_state: RoundState, to_state: RoundState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
