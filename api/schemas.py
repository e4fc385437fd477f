"""Pydantic schemas for API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int


class HandResponse(BaseModel):
    """Hand representation; face-down cards are sent as ``None``."""

    cards: list[CardResponse | None]
    score: int


class ScoresResponse(BaseModel):
    """Session win counters."""

    player_wins: int
    dealer_wins: int


class EventResponse(BaseModel):
    """A table event raised while handling the request."""

    type: str
    data: dict[str, Any]


class OutcomeResponse(BaseModel):
    """Round result."""

    outcome: str
    message: str
    cue: str


class TableStateResponse(BaseModel):
    """Current table state."""

    table_id: str
    state: str
    round_number: int
    player_hand: HandResponse
    dealer_hand: HandResponse
    draw_pile_size: int
    scores: ScoresResponse
    outcome: OutcomeResponse | None
    can_hit: bool
    can_stand: bool
    can_play_again: bool


class ActionResponse(BaseModel):
    """Result of a player action."""

    accepted: bool
    table: TableStateResponse
    events: list[EventResponse]
