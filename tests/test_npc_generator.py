"""NPC cast generation: coverage, connectivity, entry points and law."""
from __future__ import annotations

import pytest

from vineyard.constants import MIN_NPCS_PER_SIN
from vineyard.world.npc_generator import LAW_ROLE, determine_npc_count, generate_npcs
from vineyard.world.rng import create_rng
from vineyard.world.sin_chain_generator import generate_sin_chain

SEEDS = [f"cast-{i}" for i in range(8)]


def _cast(seed: str, length: int = 4, **kwargs):
    chain = generate_sin_chain(seed, length)
    return chain, generate_npcs(chain, seed, **kwargs)


class TestNpcCount:
    def test_short_chain(self):
        assert determine_npc_count(3, create_rng("x")) == 5

    @pytest.mark.parametrize("length", [6, 7])
    def test_long_chain(self, length):
        assert determine_npc_count(length, create_rng("x")) == 7

    def test_mid_chain_in_range(self):
        rng = create_rng("mid")
        assert all(5 <= determine_npc_count(4, rng) <= 7 for _ in range(20))

    @pytest.mark.parametrize("length", [3, 4, 5, 6, 7])
    def test_generated_cast_size(self, length):
        _, result = _cast("sized", length)
        assert 5 <= len(result.npcs) <= 7


class TestCoverage:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_every_sin_has_two_linked_npcs(self, seed):
        _, result = _cast(seed, 5)
        for sin in result.updated_sin_chain:
            assert len(sin.linked_npcs) >= MIN_NPCS_PER_SIN, sin.id

    @pytest.mark.parametrize("seed", SEEDS)
    def test_no_isolated_npcs(self, seed):
        _, result = _cast(seed)
        for npc in result.npcs:
            mine = {s.id for s in result.updated_sin_chain if npc.id in s.linked_npcs}
            assert mine, npc.id
            others = {
                s.id
                for s in result.updated_sin_chain
                for other in s.linked_npcs
                if other != npc.id
            }
            assert mine & others, npc.id

    @pytest.mark.parametrize("seed", SEEDS)
    def test_every_sin_has_an_entry_fact(self, seed):
        _, result = _cast(seed, 6)
        entry = {
            f.sin_id
            for npc in result.npcs
            for f in npc.knowledge.facts
            if f.min_trust_level == 0
        }
        assert {s.id for s in result.updated_sin_chain} <= entry


class TestNpcShape:
    def test_input_chain_untouched(self):
        chain, result = _cast("pure")
        assert all(sin.linked_npcs == [] for sin in chain)
        assert [s.id for s in result.updated_sin_chain] == [s.id for s in chain]

    def test_npcs_have_knowledge_and_thresholds(self):
        _, result = _cast("shape")
        for npc in result.npcs:
            assert npc.knowledge is not None
            assert npc.knowledge.npc_id == npc.id
            assert any(f.min_trust_level == 0 for f in npc.knowledge.facts)
            assert any(f.sin_id for f in npc.knowledge.facts)
            assert {t.approach for t in npc.conflict_thresholds} == {"body", "will", "heart", "acuity"}
            assert all(0 <= t.resist_chance <= 1 for t in npc.conflict_thresholds)

    def test_ids_unique_and_roles_distinct(self):
        _, result = _cast("ids", 7)
        assert len({n.id for n in result.npcs}) == len(result.npcs)
        assert len({n.role for n in result.npcs}) == len(result.npcs)

    def test_placeholder_locations(self):
        _, result = _cast("placeholders")
        assert all(n.location_id.startswith("loc-") for n in result.npcs)

    def test_facts_are_filled(self):
        _, result = _cast("prose")
        for npc in result.npcs:
            for fact in npc.knowledge.facts:
                assert "{" not in fact.content

    def test_deterministic(self):
        assert _cast("again")[1] == _cast("again")[1]


class TestLaw:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_lawless_town_has_no_sheriff(self, seed):
        _, result = _cast(seed, 7, has_law=False)
        assert LAW_ROLE not in {n.role for n in result.npcs}

    @pytest.mark.parametrize("seed", SEEDS)
    def test_lawful_town_seats_sheriff_on_first_sin(self, seed):
        _, result = _cast(seed, has_law=True)
        sheriffs = [n for n in result.npcs if n.role == LAW_ROLE]
        assert len(sheriffs) == 1
        assert sheriffs[0].id in result.updated_sin_chain[0].linked_npcs


class TestRelationships:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_relationships_reference_cast(self, seed):
        _, result = _cast(seed, 7)
        ids = {n.id for n in result.npcs}
        sin_ids = {s.id for s in result.updated_sin_chain}
        for rel in result.relationships:
            assert rel.from_npc in ids
            assert rel.to_npc in ids
            assert rel.from_npc != rel.to_npc
            assert rel.sin_id in sin_ids

    def test_no_duplicate_ties(self):
        _, result = _cast("ties", 7)
        keys = [(r.from_npc, r.to_npc, r.type) for r in result.relationships]
        assert len(keys) == len(set(keys))
