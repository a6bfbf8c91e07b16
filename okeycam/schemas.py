from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TileColor(str, Enum):
    red = "red"
    blue = "blue"
    black = "black"
    yellow = "yellow"


COLOR_ORDER: tuple[TileColor, ...] = (TileColor.red, TileColor.blue, TileColor.black, TileColor.yellow)


class Tile(BaseModel):
    """One Okey piece. No range or color checks happen here; scoring only reads the fields."""

    color: TileColor | str | None = None
    value: int
    is_joker: bool = False

    model_config = ConfigDict(frozen=True)


class ScoringResult(BaseModel):
    score: int
    breakdown: list[str] = Field(default_factory=list)
    total_tiles: int

    model_config = ConfigDict(frozen=True)


class ImageMeta(BaseModel):
    width: int
    height: int
    expires_at: datetime


class SupplierMeta(BaseModel):
    name: str
    version: str


class HandEstimate(BaseModel):
    tiles_count: int
    tiles: list[Tile]


class CaptureResponse(BaseModel):
    capture_id: UUID
    status: Literal["ok"]
    image: ImageMeta
    hand_estimate: HandEstimate
    supplier: SupplierMeta
    warnings: list[str] = Field(default_factory=list)


class MockHandResponse(BaseModel):
    tiles: list[Tile]


class ScoreRequest(BaseModel):
    capture_id: UUID | None = None
    tiles: list[Tile]


class ScoreResponse(BaseModel):
    score_id: UUID
    status: Literal["ok"]
    result: ScoringResult
    warnings: list[str] = Field(default_factory=list)


class ScanResponse(BaseModel):
    capture: CaptureResponse
    score: ScoreResponse


RecordKind = Literal["capture", "score", "feedback"]


class RecordLink(BaseModel):
    id: UUID
    type: RecordKind


class ResultGetResponse(BaseModel):
    id: UUID
    type: RecordKind
    created_at: datetime
    expires_at: datetime
    parent_id: UUID | None = None
    lineage: list[RecordLink] = Field(default_factory=list)
    data: dict


class ScoreFeedbackRequest(BaseModel):
    score_request: ScoreRequest
    score_response: ScoreResponse
    corrected_score: int | None = Field(default=None, ge=0)
    comment: str = ""
