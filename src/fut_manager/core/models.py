"""
Pydantic models for game entities and API payloads.

These models are used for:
- Validating request bodies
- Decoding documents loaded from the store
- API response serialization
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .types import ManageType, PackType


# =============================================================================
# Core Entity Models
# =============================================================================


class Player(BaseModel):
    """Catalog player. Field names follow the catalog dataset columns."""

    model_config = ConfigDict(extra="ignore")

    id: str
    long_name: Optional[str] = None
    short_name: Optional[str] = None
    player_positions: Optional[str] = None
    club_position: Optional[str] = None
    club_name: Optional[str] = None
    league_name: Optional[str] = None
    nationality_name: Optional[str] = None
    age: Optional[int] = None
    overall: Optional[int] = None
    potential: Optional[int] = None
    # Face stats are missing for goalkeepers in the source dataset
    pace: Optional[Any] = None
    passing: Optional[Any] = None
    physic: Optional[Any] = None
    shooting: Optional[Any] = None
    dribbling: Optional[Any] = None
    defending: Optional[Any] = None
    player_face_url: Optional[str] = None
    club_logo_url: Optional[str] = None
    nation_flag_url: Optional[str] = None
    weak_foot: Optional[int] = None
    skill_moves: Optional[int] = None
    work_rate: Optional[str] = None
    preferred_foot: Optional[str] = None


class Scorer(BaseModel):
    """Goals by one player in one result."""

    player: Player
    count: int = Field(ge=1)


class Result(BaseModel):
    """A recorded fixture between two managers."""

    id: Optional[str] = None
    season: Optional[str] = None
    home: Optional[str] = None
    away: Optional[str] = None
    season_type: Optional[str] = None
    season_title: Optional[str] = None
    home_manager: str = ""
    away_manager: str = ""
    score: Optional[list[int]] = Field(default_factory=list)
    home_scorers: list[Scorer] = Field(default_factory=list)
    away_scorers: list[Scorer] = Field(default_factory=list)


class Manager(BaseModel):
    """A player-controlled team with a roster, a point balance and results."""

    id: Optional[str] = None
    name: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    points: int = 0
    players: list[Player] = Field(default_factory=list)
    results: list[Result] = Field(default_factory=list)

    def _player_index(self, player_id: str) -> int | None:
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return None

    def add_player(self, player: Player) -> bool:
        """Add a player to the roster. Returns False if already present."""
        if self._player_index(player.id) is not None:
            return False
        self.players.append(player)
        return True

    def remove_player(self, player_id: str) -> bool:
        """Remove a player from the roster. Returns False if not present."""
        index = self._player_index(player_id)
        if index is None:
            return False
        del self.players[index]
        return True

    def find_player(self, player_id: str) -> Player | None:
        index = self._player_index(player_id)
        return self.players[index] if index is not None else None

    def manage_points(self, point: int, manage_type: int) -> None:
        """Spend points when manage_type is 0, otherwise add them."""
        if manage_type == ManageType.remove:
            self.points -= point
        else:
            self.points += point


class Season(BaseModel):
    """A competition period grouping an ordered list of results."""

    id: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    results: list[Result] = Field(default_factory=list)


class SeasonSummary(BaseModel):
    """Season without its results, for listings."""

    id: str
    type: Optional[str] = None
    title: Optional[str] = None


# =============================================================================
# Request Models
# =============================================================================


class PlayerFilter(BaseModel):
    """
    Player search filter.

    Text fields are case-insensitive pattern matches. Numeric fields take one
    value (exact match) or two values (inclusive range); other lengths are ignored.
    """

    name: str = ""
    club: str = ""
    league: str = ""
    nationality: str = ""
    position: str = ""
    age: list[int] = Field(default_factory=list)
    overall: list[int] = Field(default_factory=list)
    potential: list[int] = Field(default_factory=list)


class CreateManagerRequest(BaseModel):
    name: str = Field(min_length=1)
    user_id: Optional[str] = None
    email: Optional[str] = None


class ManagePlayerRequest(BaseModel):
    manager: str
    player: str
    type: int = ManageType.remove


class ManagePointRequest(BaseModel):
    manager: str
    point: int = Field(ge=0)
    type: int = ManageType.remove


class CreateSeasonRequest(BaseModel):
    type: Optional[str] = None
    title: Optional[str] = None


class StatisticRequest(BaseModel):
    season: str


class ScorerRequest(BaseModel):
    player: str
    manager: str
    count: int = Field(ge=1)


class ResultRequest(BaseModel):
    season: str
    home: str
    away: str
    score: list[int]
    scorers: list[ScorerRequest] = Field(
        default_factory=list,
        validation_alias=AliasChoices("scorers", "scorer"),
    )

    @field_validator("score")
    @classmethod
    def _check_score(cls, value: list[int]) -> list[int]:
        if len(value) != 2:
            raise ValueError("score must contain exactly two values [home, away]")
        if any(goals < 0 for goals in value):
            raise ValueError("score values must be non-negative")
        return value


class PackRequest(BaseModel):
    manager: str
    type: PackType


# =============================================================================
# Response Models
# =============================================================================


class PlayersResponse(BaseModel):
    count: int
    players: list[Player]


class PackResponse(BaseModel):
    player: Player
    point: int
    message: str
