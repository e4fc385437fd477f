"""Table API endpoints."""

from contextvars import ContextVar
from typing import Annotated, Awaitable, Callable

from fastapi import APIRouter, Depends, Header, HTTPException

from api.schemas import (
    ActionResponse,
    CardResponse,
    EventResponse,
    HandResponse,
    OutcomeResponse,
    ScoresResponse,
    TableStateResponse,
)
from api.session import TableRegistry, get_registry
from core.cards import Card
from core.game import BlackjackTable, GameEvent
from core.hand import Hand

router = APIRouter()

_current_action: ContextVar[object | None] = ContextVar("current_action", default=None)


def _card_to_response(card: Card) -> CardResponse:
    return CardResponse(rank=str(card.rank), suit=str(card.suit), value=card.value)


def _hand_to_response(hand: Hand, score: int) -> HandResponse:
    """Convert a Hand to HandResponse without exposing face-down cards."""
    return HandResponse(
        cards=[
            None if hand.is_hidden(i) else _card_to_response(card)
            for i, card in enumerate(hand.cards)
        ],
        score=score,
    )


def _table_state_response(table_id: str, table: BlackjackTable) -> TableStateResponse:
    """Convert table state to response."""
    outcome = None
    if table.outcome is not None:
        outcome = OutcomeResponse(
            outcome=table.outcome.name,
            message=table.outcome.message,
            cue=table.outcome.cue,
        )

    player_wins, dealer_wins = table.cumulative_scores()
    return TableStateResponse(
        table_id=table_id,
        state=table.state.name,
        round_number=table.round_number,
        player_hand=_hand_to_response(table.player_hand, table.current_player_score()),
        dealer_hand=_hand_to_response(table.dealer_hand, table.current_dealer_score()),
        draw_pile_size=table.shoe.draw_pile_size,
        scores=ScoresResponse(player_wins=player_wins, dealer_wins=dealer_wins),
        outcome=outcome,
        can_hit=table.can_hit,
        can_stand=table.can_stand,
        can_play_again=table.can_play_again,
    )


async def _run_action(
    table_id: str,
    table: BlackjackTable,
    action: Callable[[], Awaitable[bool]],
) -> ActionResponse:
    """
    Run a table action and collect the events it raised.

    Events are matched to the request through a context variable, so a
    concurrent request on the same table never sees this one's events.
    Tasks the action spawns inherit the context.
    """
    marker = object()
    collected: list[GameEvent] = []

    def collect(event: GameEvent) -> None:
        if _current_action.get() is marker:
            collected.append(event)

    token = _current_action.set(marker)
    table.subscribe(collect)
    try:
        accepted = await action()
    finally:
        table.unsubscribe(collect)
        _current_action.reset(token)

    events = [EventResponse(type=e.event_type.name, data=e.data) for e in collected]
    return ActionResponse(
        accepted=accepted,
        table=_table_state_response(table_id, table),
        events=events,
    )


def _get_table(
    table_id: Annotated[str, Header(alias="X-Table-ID")],
    registry: Annotated[TableRegistry, Depends(get_registry)],
) -> tuple[str, BlackjackTable]:
    table = registry.get(table_id)
    if table is None:
        raise HTTPException(status_code=404, detail="Table not found")
    return table_id, table


TableDep = Annotated[tuple[str, BlackjackTable], Depends(_get_table)]


@router.post("/new")
async def new_table(
    registry: Annotated[TableRegistry, Depends(get_registry)],
) -> ActionResponse:
    """Open a table and deal the first round."""
    table_id, table = registry.create()
    return await _run_action(table_id, table, table.start)


@router.get("/state")
async def get_state(entry: TableDep) -> TableStateResponse:
    """Get current table state."""
    table_id, table = entry
    return _table_state_response(table_id, table)


@router.post("/hit")
async def hit(entry: TableDep) -> ActionResponse:
    """Player takes another card."""
    table_id, table = entry
    return await _run_action(table_id, table, table.hit)


@router.post("/stand")
async def stand(entry: TableDep) -> ActionResponse:
    """Player stands; the dealer plays and the round resolves."""
    table_id, table = entry
    return await _run_action(table_id, table, table.stand)


@router.post("/play-again")
async def play_again(entry: TableDep) -> ActionResponse:
    """Deal a new round at the same table."""
    table_id, table = entry
    return await _run_action(table_id, table, table.play_again)


@router.post("/leave")
async def leave_table(
    entry: TableDep,
    registry: Annotated[TableRegistry, Depends(get_registry)],
) -> dict[str, str]:
    """Leave the table (the main-menu action)."""
    table_id, _ = entry
    registry.close(table_id)
    return {"status": "closed"}
