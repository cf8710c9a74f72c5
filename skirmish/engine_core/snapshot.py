"""
Pydantic models of the persisted world layout.

These models define the exact JSON contract of a saved world:

    {
      "gamePhase": str,
      "playerUid": int | null,
      "entities": [{"type": str, "data": {uid, name, type, description,
                    numAttrs: {values}, txtAttrs: {values}}}],
      "encounter": {phase, currentTurnIndex, enemies, turnOrder, round} | null,
      "nextUid": int
    }

Cross references are uids only. Validation here is structural; semantic
anomalies (unknown entity type, dangling uid) are handled by the loader.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field

from .phase_graph import START


class AttributeData(BaseModel):
    """Serialized AttributeSet."""
    values: dict[str, Any] = Field(default_factory=dict)


class EntityData(BaseModel):
    """Serialized Entity."""
    uid: int
    name: str = ""
    type: str
    description: Optional[str] = None
    num_attrs: AttributeData = Field(default_factory=AttributeData, alias="numAttrs")
    txt_attrs: AttributeData = Field(default_factory=AttributeData, alias="txtAttrs")

    model_config = {"populate_by_name": True}


class EntityRecord(BaseModel):
    """Entity plus the type tag used to pick its reconstruction factory."""
    type: str
    data: EntityData


class EncounterData(BaseModel):
    """Serialized Encounter (entity references as uids)."""
    phase: str = START
    current_turn_index: int = Field(0, alias="currentTurnIndex")
    enemies: list[int] = Field(default_factory=list)
    turn_order: list[int] = Field(default_factory=list, alias="turnOrder")
    round: int = 1

    model_config = {"populate_by_name": True}


class WorldSnapshot(BaseModel):
    """Complete persisted world state."""
    game_phase: str = Field(START, alias="gamePhase")
    player_uid: Optional[int] = Field(None, alias="playerUid")
    entities: list[EntityRecord] = Field(default_factory=list)
    encounter: Optional[EncounterData] = None
    next_uid: int = Field(0, alias="nextUid")

    model_config = {"populate_by_name": True}
