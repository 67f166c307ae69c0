"""Snapshot schemas for request/response validation."""

from typing import Optional

from pydantic import BaseModel, Field

from mazebrain.core.flood_fill import Analysis
from mazebrain.core.maze_state import AgentState, Door, FloorState, KeyItem, MazeSnapshot


class DoorPayload(BaseModel):
    """Schema for a door on a seam cell."""

    cell_x: int = Field(..., ge=0)
    cell_y: int = Field(..., ge=0)
    level: int = Field(..., ge=0, le=1)
    locked: bool = True


class KeyItemPayload(BaseModel):
    """Schema for a key lying in a room."""

    code: int = Field(..., ge=4, le=5)
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    available: bool = True


class FloorPayload(BaseModel):
    """Schema for one floor."""

    grid: list[list[int]] = Field(..., min_length=3)
    doors: list[DoorPayload] = []
    items: list[KeyItemPayload] = []


class AgentPayload(BaseModel):
    """Schema for the agent's position and carried consumables."""

    x: int
    y: int
    consumable_items: dict[str, int] = {}


class SnapshotPayload(BaseModel):
    """Schema for a full world snapshot."""

    floors: list[FloorPayload] = Field(..., min_length=1)
    current_floor: int = Field(0, ge=0)
    agent: AgentPayload
    is_won: bool = False

    def to_snapshot(self) -> MazeSnapshot:
        """Build the solver's in-memory snapshot."""
        return MazeSnapshot(
            floors=[
                FloorState(
                    grid=[list(row) for row in floor.grid],
                    doors=[Door(**door.model_dump()) for door in floor.doors],
                    items=[KeyItem(**item.model_dump()) for item in floor.items],
                )
                for floor in self.floors
            ],
            current_floor=self.current_floor,
            agent=AgentState(
                x=self.agent.x,
                y=self.agent.y,
                consumable_items=dict(self.agent.consumable_items),
            ),
            is_won=self.is_won,
        )

    @classmethod
    def from_snapshot(cls, snapshot: MazeSnapshot) -> "SnapshotPayload":
        """Serialize an in-memory snapshot."""
        return cls(
            floors=[
                FloorPayload(
                    grid=[list(row) for row in floor.grid],
                    doors=[
                        DoorPayload(
                            cell_x=door.cell_x,
                            cell_y=door.cell_y,
                            level=door.level,
                            locked=door.locked,
                        )
                        for door in floor.doors
                    ],
                    items=[
                        KeyItemPayload(
                            code=item.code,
                            x=item.x,
                            y=item.y,
                            available=item.available,
                        )
                        for item in floor.items
                    ],
                )
                for floor in snapshot.floors
            ],
            current_floor=snapshot.current_floor,
            agent=AgentPayload(
                x=snapshot.agent.x,
                y=snapshot.agent.y,
                consumable_items=dict(snapshot.agent.consumable_items),
            ),
            is_won=snapshot.is_won,
        )


class StepResponse(BaseModel):
    """Schema for the next step decision."""

    dx: int
    dy: int
    cached: bool
    floor: int
    remaining: int


class OverrideResponse(BaseModel):
    """Schema for an override acknowledgement."""

    agent_id: str
    invalidated: bool


class KeyPositionResponse(BaseModel):
    """Schema for a key the agent should fetch."""

    color: str
    x: int
    y: int


class AnalysisResponse(BaseModel):
    """Schema for a flood-fill analysis."""

    reachable: bool
    distance: Optional[int] = None
    required_keys: dict[str, int] = {}
    missing_keys: dict[str, int] = {}
    keys_to_fetch: list[KeyPositionResponse] = []
    next_step: Optional[dict[str, int]] = None

    @classmethod
    def from_analysis(cls, analysis: Analysis) -> "AnalysisResponse":
        """Serialize an Analysis."""
        return cls(
            reachable=analysis.reachable,
            distance=analysis.distance,
            required_keys={color.name: count for color, count in analysis.required_keys.items()},
            missing_keys={color.name: count for color, count in analysis.missing_keys.items()},
            keys_to_fetch=[KeyPositionResponse(**key.to_dict()) for key in analysis.keys_to_fetch],
            next_step=analysis.next_step.to_dict() if analysis.next_step else None,
        )
