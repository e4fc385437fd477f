"""Tests for the dealing protocol and the action guard."""

import asyncio

import pytest

from core.exceptions import ExhaustedShoeError
from core.game.dealing import ActionGuard, CardDealer
from core.game.events import EventEmitter, EventType
from core.hand import Hand, Participant


@pytest.fixture
def events():
    return EventEmitter()


@pytest.fixture
def make_dealer(events, instant):
    """Factory for a CardDealer over a given shoe."""

    def _make(shoe) -> CardDealer:
        return CardDealer(shoe, ActionGuard(), events, instant)

    return _make


class TestActionGuard:
    """Tests for the ActionGuard."""

    def test_starts_clear(self):
        """Test a new guard has nothing outstanding."""
        assert not ActionGuard().is_set

    def test_engage_once(self):
        """Test only one operation can be outstanding."""
        guard = ActionGuard()
        assert guard.engage()
        assert guard.is_set
        assert not guard.engage()

    def test_release(self):
        """Test release clears the guard."""
        guard = ActionGuard()
        guard.engage()
        guard.release()
        assert not guard.is_set
        assert guard.engage()

    @pytest.mark.asyncio
    async def test_waiter_resumes_after_release(self):
        """Test waiters stay suspended until the guard is released."""
        guard = ActionGuard()
        guard.engage()
        waiter = asyncio.create_task(guard.wait_released())

        await asyncio.sleep(0)
        assert not waiter.done()

        guard.release()
        await asyncio.wait_for(waiter, timeout=1)
        assert waiter.done()

    @pytest.mark.asyncio
    async def test_wait_returns_immediately_when_clear(self):
        """Test waiting on a clear guard does not block."""
        await asyncio.wait_for(ActionGuard().wait_released(), timeout=1)


class TestCardDealer:
    """Tests for single-card dealing."""

    @pytest.mark.asyncio
    async def test_deal_moves_card_into_hand(self, stacked_shoe, make_dealer):
        """Test a deal appends the top card and tracks it as in use."""
        shoe = stacked_shoe("AS", "KH")
        dealer = make_dealer(shoe)
        hand = Hand(Participant.PLAYER)
        dealer.guard.engage()

        card = await dealer.deal_card(hand)

        assert str(card) == "A♠"
        assert hand.cards == [card]
        assert shoe.draw_pile_size == 1
        assert shoe.in_use_pile_size == 1
        assert not dealer.guard.is_set

    @pytest.mark.asyncio
    async def test_player_cards_face_up(self, stacked_shoe, make_dealer):
        """Test every player card is dealt face up."""
        dealer = make_dealer(stacked_shoe("2S", "3S", "4S"))
        hand = Hand(Participant.PLAYER)
        for _ in range(3):
            await dealer.deal_card(hand)
        assert not hand.hidden

    @pytest.mark.asyncio
    async def test_only_second_dealer_card_hidden(self, stacked_shoe, make_dealer, events):
        """Test the dealer's second card is face down and later ones are up."""
        dealer = make_dealer(stacked_shoe("6S", "7S", "5S", "2S"))
        hand = Hand(Participant.DEALER)
        for _ in range(4):
            await dealer.deal_card(hand)

        assert hand.hidden == {1}
        dealt = events.of_type(EventType.CARD_DEALT)
        assert [e.data["hidden"] for e in dealt] == [False, True, False, False]
        assert dealt[1].data["card"] is None
        assert [e.data["position"] for e in dealt] == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_empty_draw_pile_reshuffles_once(self, stacked_shoe, make_dealer, events):
        """Test an empty draw pile triggers exactly one reshuffle before the deal."""
        shoe = stacked_shoe("2S", "3S", "4S")
        dealer = make_dealer(shoe)
        hand = Hand(Participant.PLAYER)
        for _ in range(3):
            await dealer.deal_card(hand)
        shoe.move_all_in_use_to_discard()
        assert shoe.draw_pile_size == 0

        await dealer.deal_card(Hand(Participant.PLAYER))

        assert len(events.of_type(EventType.SHOE_SHUFFLED)) == 1
        assert shoe.discard_pile_size == 0
        assert shoe.draw_pile_size == 2
        assert shoe.in_use_pile_size == 1

    @pytest.mark.asyncio
    async def test_no_reshuffle_while_cards_remain(self, stacked_shoe, make_dealer, events):
        """Test the reshuffle check does nothing while the draw pile has cards."""
        dealer = make_dealer(stacked_shoe("2S"))
        assert not await dealer.reshuffle_if_needed()
        assert not events.of_type(EventType.SHOE_SHUFFLED)

    @pytest.mark.asyncio
    async def test_exhausted_shoe_releases_guard(self, stacked_shoe, make_dealer):
        """Test an exhausted shoe raises and still releases the guard."""
        dealer = make_dealer(stacked_shoe())
        dealer.guard.engage()

        with pytest.raises(ExhaustedShoeError):
            await dealer.deal_card(Hand(Participant.PLAYER))

        assert not dealer.guard.is_set
