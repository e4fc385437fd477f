"""Blackjack table engine with state machine."""

import asyncio
import logging
from random import Random
from typing import Callable

from transitions import Machine

from config import TableConfig, TimingConfig, config
from core.cards import Card, Shoe
from core.exceptions import InvalidActionError
from core.game.dealing import ActionGuard, CardDealer
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.outcome import Outcome, SessionScores, resolve
from core.game.state import RoundState
from core.hand import BLACKJACK, Hand, Participant

logger = logging.getLogger(__name__)


class BlackjackTable:
    """
    Single-table blackjack round engine using a state machine.

    One dealer, one player. Every deal goes through the ActionGuard, so at
    most one card is in flight at any time. Player actions arriving while a
    deal is outstanding, or outside the player's turn, are ignored.
    Communication with the presentation layer happens through events only.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "begin_deal", "source": "setup", "dest": "dealing_initial"},
        {"trigger": "open_turn", "source": "dealing_initial", "dest": "player_turn"},
        # dealing_initial -> dealer_turn is the forced stand on a dealt 21
        {"trigger": "player_done", "source": ["dealing_initial", "player_turn"], "dest": "dealer_turn"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "resolved"},
        {"trigger": "new_round", "source": "resolved", "dest": "setup"},
    ]

    def __init__(
        self,
        shoe: Shoe | None = None,
        scores: SessionScores | None = None,
        timing: TimingConfig | None = None,
        table_config: TableConfig | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new table.

        Args:
            shoe: Card supply (a fresh shoe of ``table_config.num_decks`` if not provided)
            scores: Session win counters, shared across rounds
            timing: Pacing delays (configured defaults if not provided)
            table_config: Table settings
            rng: Random number generator for reproducible shuffles
        """
        self.table_config = table_config or config.table
        self.timing = timing or config.timing
        self.shoe = shoe if shoe is not None else Shoe(num_decks=self.table_config.num_decks, rng=rng)
        self.scores = scores if scores is not None else SessionScores()

        self.events = EventEmitter()
        self.guard = ActionGuard()
        self.dealer = CardDealer(self.shoe, self.guard, self.events, self.timing)

        self.dealer_hand = Hand(Participant.DEALER)
        self.player_hand = Hand(Participant.PLAYER)
        self.outcome: Outcome | None = None
        self.round_number = 0

        self._started = False
        self._player_won = False
        self._actions_enabled = False
        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="setup",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_log_transition",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    def _log_transition(self) -> None:
        logger.debug("Round %d entered %s", self.round_number, self.state.name)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    def unsubscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Stop delivering table events to a handler."""
        self.events.unsubscribe(handler, event_type)

    # Actions

    async def start(self) -> bool:
        """Begin the session: shuffle the shoe, then deal the first round."""
        try:
            self._check_start()
        except InvalidActionError as exc:
            return self._reject(exc)

        self._started = True
        await asyncio.sleep(self.timing.initial_delay)

        self.shoe.shuffle_draw_pile()
        logger.info("Session started with %d cards in the shoe", self.shoe.draw_pile_size)
        self.events.emit_new(EventType.SHOE_SHUFFLED, draw_pile_size=self.shoe.draw_pile_size)
        await asyncio.sleep(self.timing.after_shuffle)

        await self._deal_new_hand()
        return True

    async def hit(self) -> bool:
        """Player takes another card."""
        try:
            self._check_player_action("hit")
        except InvalidActionError as exc:
            return self._reject(exc)

        self.guard.engage()
        await self._hit()
        return True

    async def stand(self) -> bool:
        """Player keeps the current hand; the dealer plays out the round."""
        try:
            self._check_player_action("stand")
        except InvalidActionError as exc:
            return self._reject(exc)

        self.guard.engage()
        await self._stand(forced=False)
        return True

    async def play_again(self) -> bool:
        """Clear the table and deal a new round."""
        try:
            self._check_play_again()
        except InvalidActionError as exc:
            return self._reject(exc)

        self.new_round()
        await self._deal_new_hand()
        return True

    async def wait_idle(self) -> None:
        """Suspend until no deal is outstanding."""
        await self.guard.wait_released()

    def _check_start(self) -> None:
        if self._started:
            raise InvalidActionError("start", "session already started")

    def _check_play_again(self) -> None:
        if self.guard.is_set:
            raise InvalidActionError("play again", "a deal is in progress")
        if self.state != RoundState.RESOLVED:
            raise InvalidActionError("play again", f"round is in {self.state}")

    def _check_player_action(self, action: str) -> None:
        """Raise InvalidActionError unless hit/stand is allowed right now."""
        if self.guard.is_set:
            raise InvalidActionError(action, "a deal is in progress")
        if self.state != RoundState.PLAYER_TURN:
            raise InvalidActionError(action, f"round is in {self.state}")
        if not self._actions_enabled:
            raise InvalidActionError(action, "player actions are disabled")

    def _reject(self, exc: InvalidActionError) -> bool:
        logger.debug("Ignored action: %s", exc)
        self.events.emit_new(EventType.INVALID_ACTION, action=exc.action, reason=exc.reason)
        return False

    # Round flow

    async def _deal_new_hand(self) -> None:
        """Reset the table and deal two cards each, dealer first."""
        if self.shoe.in_use_pile_size > 0:
            self.shoe.move_all_in_use_to_discard()

        self.dealer_hand.clear()
        self.player_hand.clear()
        self.outcome = None
        self._player_won = False
        self._actions_enabled = False

        self.round_number += 1
        self.begin_deal()
        self.events.emit_new(EventType.ROUND_STARTED, round_number=self.round_number)

        for i in range(self.table_config.initial_cards):
            if i % 2 == 0:
                await self._deal_and_wait(self.dealer_hand)
                if i == 0:
                    self._show_score(self.dealer_hand)
            else:
                await self._deal_and_wait(self.player_hand)
                self._show_score(self.player_hand)
                if self.player_hand.value == BLACKJACK:
                    self._player_won = True

            await asyncio.sleep(self.timing.before_deal)

        if self._player_won:
            logger.info("Player dealt %d, standing automatically", BLACKJACK)
            self.guard.engage()
            await self._stand(forced=True)
            return

        self.open_turn()
        self._actions_enabled = True

    async def _deal_and_wait(self, hand: Hand) -> Card:
        """Deal one card and suspend until the guard clears."""
        # Already engaged when the deal belongs to a player action
        self.guard.engage()
        deal = asyncio.create_task(self.dealer.deal_card(hand))
        await self.guard.wait_released()
        return await deal

    async def _hit(self) -> None:
        card = await self._deal_and_wait(self.player_hand)
        score = self.player_hand.value
        self.events.emit_new(EventType.PLAYER_HIT, card=str(card), score=score)
        self._show_score(self.player_hand)

        if score > BLACKJACK:
            self._actions_enabled = False
            self.events.emit_new(EventType.PLAYER_BUSTS, score=score)
            await asyncio.sleep(self.timing.before_results)
            self.guard.engage()
            await self._stand(forced=True)
            return

        await asyncio.sleep(self.timing.after_hit)

    async def _stand(self, forced: bool) -> None:
        """Reveal the hole card, let the dealer draw, and resolve the round."""
        self._actions_enabled = False
        self.player_done()
        self.events.emit_new(
            EventType.PLAYER_STAND,
            forced=forced,
            score=self.player_hand.value,
        )

        revealed = self.dealer_hand.reveal_all()
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(revealed[0]) if revealed else None,
            score=self.dealer_hand.value,
        )
        self._show_score(self.dealer_hand)

        await asyncio.sleep(self.timing.before_results)

        if self.player_hand.value <= BLACKJACK:
            await self._play_dealer()

        self.outcome = resolve(self.player_hand.value, self.dealer_hand.value, self.scores)
        self.dealer_done()
        self.events.emit_new(
            EventType.ROUND_RESOLVED,
            outcome=self.outcome.name,
            message=self.outcome.message,
            cue=self.outcome.cue,
            player_wins=self.scores.player_wins,
            dealer_wins=self.scores.dealer_wins,
        )
        self.guard.release()

    async def _play_dealer(self) -> None:
        """Dealer draws until reaching the stand threshold."""
        while self.dealer_hand.value < self.table_config.dealer_stands_on:
            await self._deal_and_wait(self.dealer_hand)
            score = self.dealer_hand.value
            self.events.emit_new(EventType.DEALER_HITS, score=score)
            self._show_score(self.dealer_hand)
            await asyncio.sleep(self.timing.before_deal)

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, score=self.dealer_hand.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, score=self.dealer_hand.value)

    def _show_score(self, hand: Hand) -> None:
        self.events.emit_new(
            EventType.HAND_SCORE_CHANGED,
            owner=hand.owner.value,
            score=hand.displayed_value,
        )

    # Queries

    def current_player_score(self) -> int:
        """Return the player's score as displayed."""
        return self.player_hand.displayed_value

    def current_dealer_score(self) -> int:
        """Return the dealer's score as displayed; the hole card never leaks."""
        return self.dealer_hand.displayed_value

    def cumulative_scores(self) -> tuple[int, int]:
        """Return ``(player_wins, dealer_wins)`` for the session."""
        return self.scores.as_tuple()

    @property
    def is_pre_won(self) -> bool:
        """Check if the player was dealt 21 this round."""
        return self._player_won

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return (
            self.state == RoundState.PLAYER_TURN
            and self._actions_enabled
            and not self.guard.is_set
        )

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.can_hit

    @property
    def can_play_again(self) -> bool:
        """Check if a new round can be dealt."""
        return self.state == RoundState.RESOLVED and not self.guard.is_set
