"""Single-card dealing protocol and the re-entrancy guard around it."""

import asyncio
import logging

from config import TimingConfig
from core.cards import Card, Shoe
from core.game.events import EventEmitter, EventType
from core.hand import Hand, Participant

logger = logging.getLogger(__name__)


class ActionGuard:
    """
    Flag marking that a dealing operation is outstanding.

    The routine that starts a deal engages the guard; the dealer releases it
    once the card has landed. Waiters resume only after the release.
    """

    def __init__(self) -> None:
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def is_set(self) -> bool:
        """Check if an operation is outstanding."""
        return not self._idle.is_set()

    def engage(self) -> bool:
        """Mark an operation as outstanding. Returns False if one already is."""
        if self.is_set:
            return False
        self._idle.clear()
        return True

    def release(self) -> None:
        """Mark the outstanding operation as complete."""
        self._idle.set()

    async def wait_released(self) -> None:
        """Suspend until no operation is outstanding."""
        await self._idle.wait()


class CardDealer:
    """Moves cards from the shoe into hands, one at a time."""

    def __init__(
        self,
        shoe: Shoe,
        guard: ActionGuard,
        events: EventEmitter,
        timing: TimingConfig,
    ) -> None:
        self.shoe = shoe
        self.guard = guard
        self.events = events
        self.timing = timing

    async def reshuffle_if_needed(self) -> bool:
        """
        Shuffle the discard pile back in when the draw pile is empty.

        Returns:
            True if a reshuffle happened
        """
        if self.shoe.draw_pile_size > 0:
            return False

        self.shoe.shuffle_together()
        logger.info("Draw pile empty, reshuffled discards (%d cards)", self.shoe.draw_pile_size)
        self.events.emit_new(EventType.SHOE_SHUFFLED, draw_pile_size=self.shoe.draw_pile_size)
        await asyncio.sleep(self.timing.after_shuffle)
        return True

    @staticmethod
    def deals_face_up(hand: Hand) -> bool:
        """Whether the next card for ``hand`` lands face up (only the dealer's second is hidden)."""
        return hand.owner is Participant.PLAYER or hand.num_cards != 1

    async def deal_card(self, hand: Hand) -> Card:
        """
        Deal one card into ``hand`` and release the guard.

        The caller must engage the guard before calling. The guard is released
        even if the shoe turns out to be exhausted, so waiters never hang.
        """
        try:
            await self.reshuffle_if_needed()

            card = self.shoe.top_card
            face_up = self.deals_face_up(hand)
            position = hand.add_card(card, face_up=face_up)
            self.shoe.move_top_card_to_in_use()

            logger.debug(
                "Dealt %s to %s at position %d%s",
                card,
                hand.owner,
                position,
                "" if face_up else " (face down)",
            )
            self.events.emit_new(
                EventType.CARD_DEALT,
                owner=hand.owner.value,
                card=str(card) if face_up else None,
                position=position,
                hidden=not face_up,
                draw_pile_size=self.shoe.draw_pile_size,
            )
            return card
        finally:
            self.guard.release()
