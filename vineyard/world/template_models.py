"""Pydantic models for the template pack (sins, layouts, archetypes, relationships, town flavor).

Templates are authored content. A malformed template is a programmer error, so
every check here raises at load time instead of surfacing as a bad town later.
"""
from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vineyard.constants import MIN_TEMPLATES_PER_LEVEL, SIN_CHAIN_ORDER, TEMPLATE_SLOTS
from vineyard.models.town import ApproachType, RelationshipType, SinLevel

_PLACEHOLDER = re.compile(r"\{([a-zA-Z_]+)\}")


def _check_placeholders(pattern: str, where: str) -> str:
    unknown = sorted(set(_PLACEHOLDER.findall(pattern)) - TEMPLATE_SLOTS)
    if unknown:
        raise ValueError(f"{where} uses unknown placeholder(s): {', '.join(unknown)}")
    return pattern


class SinSlotTemplate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: SinLevel
    name: str
    description_pattern: str
    npc_role_slots: list[str] = Field(default_factory=list)

    @field_validator("description_pattern")
    @classmethod
    def _known_placeholders(cls, v: str) -> str:
        return _check_placeholders(v, "sin description_pattern")


class LocationSlot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str
    name_variants: list[str]
    description_variants: list[str]
    x: int
    y: int
    connections: list[str] = Field(default_factory=list)

    @field_validator("name_variants", "description_variants")
    @classmethod
    def _non_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("location slot needs at least one variant")
        return v


def slot_keys(slots: list[LocationSlot]) -> list[str]:
    """Connection keys per slot: first of a type is ``type``, the n-th repeat ``type-n``."""
    seen: dict[str, int] = {}
    keys: list[str] = []
    for slot in slots:
        count = seen.get(slot.type, 0) + 1
        seen[slot.type] = count
        keys.append(slot.type if count == 1 else f"{slot.type}-{count}")
    return keys


class LocationTemplate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    slots: list[LocationSlot]

    @model_validator(mode="after")
    def _validate_connections(self) -> "LocationTemplate":
        if not self.slots:
            raise ValueError(f"layout {self.id!r} has no slots")
        keys = set(slot_keys(self.slots))
        for slot in self.slots:
            for ref in slot.connections:
                if ref not in keys:
                    raise ValueError(f"layout {self.id!r}: slot {slot.type!r} connects to unknown key {ref!r}")
        return self


class FactTemplate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    content_pattern: str
    tags: list[str] = Field(default_factory=list)
    min_trust_level: int = 0
    required_approach: ApproachType | None = None
    for_sin_level: SinLevel | None = None

    @field_validator("content_pattern")
    @classmethod
    def _known_placeholders(cls, v: str) -> str:
        return _check_placeholders(v, "fact content_pattern")

    @field_validator("min_trust_level")
    @classmethod
    def _bounds_trust(cls, v: int) -> int:
        if v < 0 or v > 100:
            raise ValueError("min_trust_level must be within 0..100")
        return v


class ResistProfile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    body: int = 50  # 0..100
    will: int = 50
    heart: int = 50
    acuity: int = 50


class NpcArchetype(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: str
    name_prefix: str = ""
    names: list[str]
    personality_templates: list[str]
    speech_pattern_templates: list[str]
    default_location_type: str
    resist_profile: ResistProfile = Field(default_factory=ResistProfile)
    fact_templates: list[FactTemplate] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_content(self) -> "NpcArchetype":
        if not self.names or not self.personality_templates or not self.speech_pattern_templates:
            raise ValueError(f"archetype {self.role!r} needs names, personality and speech templates")
        if not any(f.min_trust_level == 0 for f in self.fact_templates):
            raise ValueError(f"archetype {self.role!r} needs at least one trust-0 fact")
        return self


class RelationshipPattern(BaseModel):
    model_config = ConfigDict(extra="forbid")

    roles: tuple[str, str]
    type: RelationshipType
    secret: bool = False


class TownFlavor(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name_prefixes: list[str]
    name_suffixes: list[str]
    descriptions: list[str]
    authority_names: list[str]
    sinner_names: list[str]
    victim_names: list[str]


class TemplateCatalog(BaseModel):
    """Every template table the generators draw from."""

    model_config = ConfigDict(extra="forbid")

    sins: list[SinSlotTemplate]
    layouts: list[LocationTemplate]
    archetypes: list[NpcArchetype]
    relationships: dict[SinLevel, list[RelationshipPattern]] = Field(default_factory=dict)
    town: TownFlavor

    @model_validator(mode="after")
    def _validate_coverage(self) -> "TemplateCatalog":
        counts = {lvl: sum(1 for t in self.sins if t.level == lvl) for lvl in SIN_CHAIN_ORDER}
        missing = [lvl for lvl, n in counts.items() if n == 0]
        if missing:
            raise ValueError(f"no sin templates for level(s): {', '.join(missing)}")
        thin = [f"{lvl} ({n})" for lvl, n in counts.items() if n < MIN_TEMPLATES_PER_LEVEL]
        if thin:
            raise ValueError(
                f"each level needs at least {MIN_TEMPLATES_PER_LEVEL} sin templates: {', '.join(thin)}"
            )
        if not self.layouts:
            raise ValueError("template pack has no location layouts")
        if not self.archetypes:
            raise ValueError("template pack has no NPC archetypes")
        roles = [a.role for a in self.archetypes]
        if len(roles) != len(set(roles)):
            raise ValueError("archetype roles must be unique")
        return self

    def sins_for_level(self, level: str) -> list[SinSlotTemplate]:
        return [t for t in self.sins if t.level == level]

    def archetype_by_role(self, role: str) -> NpcArchetype | None:
        for a in self.archetypes:
            if a.role == role:
                return a
        return None
