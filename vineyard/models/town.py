"""Town data models: the immutable output of the generation pipeline.

A ``TownData`` is built once by the orchestrator and never mutated; every
model here is frozen. Derived copies go through ``model_copy(update=...)``.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

SinLevel = Literal[
    "pride",
    "injustice",
    "sin",
    "demonic-attacks",
    "false-doctrine",
    "sorcery",
    "hate-and-murder",
]
ApproachType = Literal["body", "will", "heart", "acuity"]
RelationshipType = Literal["family", "ally", "enemy", "romantic", "secret-keeper", "victim-of", "protector-of"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SinNode(_Frozen):
    """One rung of the escalation ladder."""

    id: str
    level: SinLevel
    name: str
    description: str
    discovered: bool = False
    resolved: bool = False
    linked_npcs: list[str] = Field(default_factory=list)


class Location(_Frozen):
    id: str
    name: str
    description: str
    x: int  # map coordinates (0..1000 x, 0..800 y)
    y: int
    connections: list[str] = Field(default_factory=list)


class KnowledgeFact(_Frozen):
    id: str
    content: str
    tags: list[str] = Field(default_factory=list)
    min_trust_level: int = 0
    required_approach: ApproachType | None = None
    sin_id: str | None = None

    @field_validator("min_trust_level")
    @classmethod
    def _bounds_trust(cls, v: int) -> int:
        if v < 0 or v > 100:
            raise ValueError("min_trust_level must be within 0..100")
        return v


class NPCKnowledge(_Frozen):
    npc_id: str
    facts: list[KnowledgeFact] = Field(default_factory=list)
    personality: str = ""
    speech_pattern: str = ""


class ConflictThreshold(_Frozen):
    approach: ApproachType
    resist_chance: float  # 0..1


class NPC(_Frozen):
    id: str
    name: str
    location_id: str
    description: str
    role: str = ""
    knowledge: NPCKnowledge | None = None
    conflict_thresholds: list[ConflictThreshold] | None = None


class NPCRelationship(_Frozen):
    """Directed tie between two NPCs; ``secret`` ties are not common knowledge."""

    from_npc: str
    to_npc: str
    type: RelationshipType
    secret: bool = False
    sin_id: str | None = None


class Clue(_Frozen):
    id: str
    name: str
    description: str
    location_id: str
    sin_id: str | None = None
    found: bool = False


# --- Topic rules ---


class DefaultTopicRule(_Frozen):
    """Always-available conversation opener."""

    kind: Literal["default"] = "default"
    label: str


class DiscoveryTopicRule(_Frozen):
    """Unlocked once ANY of ``required_sin_ids`` is discovered."""

    kind: Literal["discovery"] = "discovery"
    label: str
    required_sin_ids: list[str]


class LocationTopicRule(_Frozen):
    """Only offered by one NPC while the player stands at one location."""

    kind: Literal["location"] = "location"
    label: str
    npc_id: str
    location_id: str
    topic_id: str | None = None


class ClueTopicRule(_Frozen):
    """Unlocked by finding a clue; optionally restricted to one NPC."""

    kind: Literal["clue"] = "clue"
    label: str
    required_clue_id: str
    npc_id: str | None = None


TopicRule = Annotated[
    Union[DefaultTopicRule, DiscoveryTopicRule, LocationTopicRule, ClueTopicRule],
    Field(discriminator="kind"),
]


class Topic(_Frozen):
    """A topic as offered to the player by one NPC at one moment."""

    id: str
    label: str
    available: bool = True
    requires_discovery: str | None = None
    location_only: str | None = None
    requires_clue: str | None = None


class TownData(_Frozen):
    id: str
    name: str
    description: str
    locations: list[Location] = Field(default_factory=list)
    npcs: list[NPC] = Field(default_factory=list)
    sin_chain: list[SinNode] = Field(default_factory=list)
    clues: list[Clue] = Field(default_factory=list)
    topic_rules: list[TopicRule] = Field(default_factory=list)
    relationships: list[NPCRelationship] = Field(default_factory=list)
    has_law: bool | None = None

    def location_by_id(self, location_id: str) -> Location | None:
        for loc in self.locations:
            if loc.id == location_id:
                return loc
        return None

    def npc_by_id(self, npc_id: str) -> NPC | None:
        for npc in self.npcs:
            if npc.id == npc_id:
                return npc
        return None
