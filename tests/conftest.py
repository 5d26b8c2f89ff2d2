"""Shared fixtures: a clean template cache and a small hand-built town."""
from __future__ import annotations

from typing import Callable

import pytest

from vineyard.models.town import (
    NPC,
    KnowledgeFact,
    Location,
    NPCKnowledge,
    SinNode,
    TownData,
)
from vineyard.world.template_loader import clear_template_cache, get_template_catalog
from vineyard.world.template_models import TemplateCatalog
from vineyard.world.topic_rules import generate_topic_rules


@pytest.fixture(autouse=True)
def _fresh_templates(monkeypatch):
    monkeypatch.delenv("VINEYARD_TEMPLATE_DIR", raising=False)
    clear_template_cache()
    yield
    clear_template_cache()


@pytest.fixture
def catalog() -> TemplateCatalog:
    return get_template_catalog()


def _sins() -> list[SinNode]:
    return [
        SinNode(
            id="sin-pride",
            level="pride",
            name="The Steward's Pride",
            description="The Steward rules Bitter Creek as a private kingdom.",
            linked_npcs=["npc-steward", "npc-widow"],
        ),
        SinNode(
            id="sin-injustice",
            level="injustice",
            name="Tithes Withheld",
            description="The widow's share of the tithe never reaches her.",
            linked_npcs=["npc-steward", "npc-merchant"],
        ),
        SinNode(
            id="sin-sin",
            level="sin",
            name="Theft From the Storehouse",
            description="Someone empties the storehouse by night.",
            linked_npcs=["npc-merchant", "npc-widow"],
        ),
    ]


def _npc(npc_id: str, name: str, role: str, location_id: str, entry_sin: str, deep_sin: str) -> NPC:
    return NPC(
        id=npc_id,
        name=name,
        location_id=location_id,
        description=f"The town {role}.",
        role=role,
        knowledge=NPCKnowledge(
            npc_id=npc_id,
            facts=[
                KnowledgeFact(id=f"{npc_id}-f0", content="Surface talk.", min_trust_level=0, sin_id=entry_sin),
                KnowledgeFact(id=f"{npc_id}-f1", content="A deeper worry.", min_trust_level=40, sin_id=deep_sin),
            ],
            personality="wary",
            speech_pattern="plain",
        ),
    )


def build_town(**updates) -> TownData:
    """Three sins, three NPCs, three locations; passes every validator without warnings."""
    sins = _sins()
    locations = [
        Location(id="loc-square", name="Town Square", description="Dusty.", x=500, y=400,
                 connections=["loc-chapel", "loc-store"]),
        Location(id="loc-chapel", name="The Chapel", description="Whitewashed.", x=500, y=150,
                 connections=["loc-square"]),
        Location(id="loc-store", name="General Store", description="Shelves half empty.", x=750, y=400,
                 connections=["loc-square"]),
    ]
    npcs = [
        _npc("npc-steward", "Steward Ezra", "steward", "loc-chapel", "sin-pride", "sin-injustice"),
        _npc("npc-merchant", "Brother Amos", "merchant", "loc-store", "sin-injustice", "sin-sin"),
        _npc("npc-widow", "Sister Ruth", "widow", "loc-square", "sin-sin", "sin-pride"),
    ]
    town = TownData(
        id="bitter-creek",
        name="Bitter Creek",
        description="A dry town at the edge of the faith.",
        locations=locations,
        npcs=npcs,
        sin_chain=sins,
        clues=[],
        topic_rules=generate_topic_rules(npcs, sins, locations),
    )
    return town.model_copy(update=updates) if updates else town


@pytest.fixture
def town_factory() -> Callable[..., TownData]:
    return build_town
