"""Blackjack table errors."""


class BlackjackError(Exception):
    """Base class for table errors."""


class InvalidActionError(BlackjackError):
    """A player action arrived while it is not allowed."""

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(f"Cannot {action}: {reason}")
        self.action = action
        self.reason = reason


class ExhaustedShoeError(BlackjackError):
    """Both the draw pile and the discard pile are empty."""
