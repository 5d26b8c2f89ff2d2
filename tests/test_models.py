"""Town model constraints."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from vineyard.models.town import ClueTopicRule, DiscoveryTopicRule, KnowledgeFact, SinNode, TownData


def test_models_are_frozen(town_factory):
    town = town_factory()
    with pytest.raises(ValidationError):
        town.name = "Elsewhere"
    with pytest.raises(ValidationError):
        town.sin_chain[0].discovered = True


@pytest.mark.parametrize("trust", [-1, 101])
def test_fact_trust_bounds(trust):
    with pytest.raises(ValidationError):
        KnowledgeFact(id="f", content="x", min_trust_level=trust)


def test_unknown_sin_level_rejected():
    with pytest.raises(ValidationError):
        SinNode(id="s", level="gluttony", name="x", description="y")


def test_topic_rules_parse_by_kind(town_factory):
    payload = town_factory().model_dump()
    payload["topic_rules"].append({"kind": "clue", "label": "ledger", "required_clue_id": "clue-1"})
    town = TownData.model_validate(payload)
    assert isinstance(town.topic_rules[-1], ClueTopicRule)
    assert any(isinstance(r, DiscoveryTopicRule) for r in town.topic_rules)


def test_lookups(town_factory):
    town = town_factory()
    assert town.npc_by_id("npc-widow").name == "Sister Ruth"
    assert town.location_by_id("loc-store").name == "General Store"
    assert town.npc_by_id("npc-ghost") is None
