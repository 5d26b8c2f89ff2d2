"""Deterministic NPC cast generator driven by the sin chain.

Produces 5-7 NPCs whose knowledge, sin links and relationships make every sin
in the chain investigable:

- archetypes are chosen from the role slots of each sin's templates
- every sin gets at least two linked NPCs, and no NPC is isolated
- each sin has a lead NPC whose trust-0 facts point at it
- relationships come from per-level role-pair patterns

Location ids are placeholders (``loc-<default_location_type>``); the town
orchestrator maps them onto real locations.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import BaseModel, Field

from vineyard.constants import (
    LONG_CHAIN_THRESHOLD,
    MIN_CHAIN_LENGTH,
    MIN_NPCS_PER_SIN,
    NPC_COUNT_LONG_CHAIN,
    NPC_COUNT_MAX,
    NPC_COUNT_MIN,
    NPC_COUNT_SHORT_CHAIN,
)
from vineyard.models.town import (
    NPC,
    ConflictThreshold,
    KnowledgeFact,
    NPCKnowledge,
    NPCRelationship,
    SinNode,
)
from vineyard.text_utils import fill_template
from vineyard.world.rng import SeededRNG, create_rng, short_hash
from vineyard.world.sin_chain_generator import derive_chain_slots
from vineyard.world.template_loader import get_template_catalog
from vineyard.world.template_models import NpcArchetype, TemplateCatalog

logger = logging.getLogger(__name__)

LAW_ROLE = "sheriff"
_APPROACHES = ("body", "will", "heart", "acuity")

# Sin template role slot -> archetype roles that can play it, best first.
ROLE_SLOT_TO_ARCHETYPE: dict[str, list[str]] = {
    # pride
    "steward": ["steward"],
    "elder": ["elder"],
    "preacher": ["preacher"],
    "patriarch": ["farmer", "elder"],
    "matriarch": ["widow", "healer"],
    "eldest-son": ["farmer", "sheriff"],
    "teacher": ["teacher"],
    "midwife": ["healer"],
    # injustice
    "widow": ["widow"],
    "orphan": ["widow", "healer"],
    "healer": ["healer"],
    "laborer": ["farmer"],
    "farmer": ["farmer"],
    "merchant": ["merchant"],
    "outcast": ["widow", "farmer"],
    "convert": ["farmer", "teacher"],
    # sin
    "thief": ["farmer", "merchant"],
    "shopkeeper": ["merchant"],
    "watchman": ["sheriff"],
    "lover": ["farmer", "merchant"],
    "betrayed-spouse": ["widow", "healer"],
    "confidant": ["teacher", "elder"],
    "abuser": ["farmer", "sheriff"],
    "victim-kin": ["widow", "healer"],
    "witness": ["teacher", "merchant"],
    # demonic-attacks
    "sick-elder": ["elder"],
    "accused": ["farmer", "merchant"],
    "herbalist": ["healer"],
    "rancher": ["farmer"],
    "bereaved-parent": ["widow", "elder"],
    "tracker": ["sheriff"],
    # false-doctrine
    "zealot": ["preacher", "sheriff"],
    "doubter": ["teacher", "farmer"],
    "beggar": ["widow", "farmer"],
    "frightened-child": ["widow"],
    "skeptic": ["teacher", "merchant"],
    # sorcery
    "sorcerer": ["farmer", "merchant"],
    "enabler": ["merchant", "elder"],
    "crafter": ["farmer", "healer"],
    "target": ["widow", "healer"],
    "complicit-elder": ["elder"],
    "binder": ["preacher", "farmer"],
    "bound-victim": ["widow", "healer"],
    "horrified-kin": ["elder", "widow"],
    # hate-and-murder
    "killer": ["farmer", "sheriff"],
    "accomplice": ["merchant", "sheriff"],
    "mourner": ["widow", "elder"],
    "sacrificer": ["preacher", "farmer"],
    "discoverer": ["teacher", "sheriff"],
    "silent-elder": ["elder"],
    "instigator": ["preacher", "steward"],
    "bystander": ["merchant", "teacher"],
    "survivor": ["widow", "healer"],
}
_FALLBACK_ROLES = ["farmer"]


class NPCGenerationResult(BaseModel):
    npcs: list[NPC] = Field(default_factory=list)
    relationships: list[NPCRelationship] = Field(default_factory=list)
    updated_sin_chain: list[SinNode] = Field(default_factory=list)


@dataclass
class _Assignment:
    archetype: NpcArchetype
    sin_indices: list[int]
    role_in_sin: str
    lead_sin: int | None = None


def determine_npc_count(chain_length: int, rng: SeededRNG) -> int:
    """Longer chains need a bigger cast."""
    if chain_length <= MIN_CHAIN_LENGTH:
        return NPC_COUNT_SHORT_CHAIN
    if chain_length >= LONG_CHAIN_THRESHOLD:
        return NPC_COUNT_LONG_CHAIN
    return rng.next_int(NPC_COUNT_MIN, NPC_COUNT_MAX)


def _archetype_pool(catalog: TemplateCatalog, has_law: bool | None) -> list[NpcArchetype]:
    if has_law is False:
        return [a for a in catalog.archetypes if a.role != LAW_ROLE]
    return list(catalog.archetypes)


def _find_archetype(pool: list[NpcArchetype], role: str) -> NpcArchetype | None:
    for a in pool:
        if a.role == role:
            return a
    return None


def _find_assignment(assignments: list[_Assignment], role: str) -> _Assignment | None:
    for a in assignments:
        if a.archetype.role == role:
            return a
    return None


def _sin_role_slots(level: str, catalog: TemplateCatalog, rng: SeededRNG) -> list[str]:
    templates = catalog.sins_for_level(level)
    if not templates:
        return ["farmer", "elder"]
    return rng.pick(templates).npc_role_slots[:2]


def select_archetypes(
    sin_chain: list[SinNode],
    npc_count: int,
    pool: list[NpcArchetype],
    catalog: TemplateCatalog,
    rng: SeededRNG,
    *,
    has_law: bool | None = None,
) -> list[_Assignment]:
    """Pick the cast: archetypes seeded from each sin's role slots, then topped up."""
    assignments: list[_Assignment] = []
    used_roles: set[str] = set()

    if has_law:
        sheriff = _find_archetype(pool, LAW_ROLE)
        if sheriff is not None and sin_chain:
            assignments.append(_Assignment(archetype=sheriff, sin_indices=[0], role_in_sin="watchman"))
            used_roles.add(LAW_ROLE)

    for sin_idx, sin in enumerate(sin_chain):
        for role_slot in _sin_role_slots(sin.level, catalog, rng):
            if len(assignments) >= npc_count:
                break
            candidates = ROLE_SLOT_TO_ARCHETYPE.get(role_slot, _FALLBACK_ROLES)
            selected: NpcArchetype | None = None
            for candidate in candidates:
                if candidate in used_roles:
                    continue
                selected = _find_archetype(pool, candidate)
                if selected is not None:
                    used_roles.add(candidate)
                    break
            if selected is None:
                selected = _find_archetype(pool, rng.pick(candidates)) or rng.pick(pool)

            existing = _find_assignment(assignments, selected.role)
            if existing is not None:
                if sin_idx not in existing.sin_indices:
                    existing.sin_indices.append(sin_idx)
            else:
                used_roles.add(selected.role)
                assignments.append(_Assignment(archetype=selected, sin_indices=[sin_idx], role_in_sin=role_slot))

    while len(assignments) < npc_count:
        available = [a for a in pool if _find_assignment(assignments, a.role) is None]
        if not available:
            break
        archetype = rng.pick(available)
        sin_idx = rng.next_int(0, len(sin_chain) - 1)
        assignments.append(_Assignment(archetype=archetype, sin_indices=[sin_idx], role_in_sin=archetype.role))

    return assignments


def ensure_sin_coverage(sin_chain: list[SinNode], assignments: list[_Assignment]) -> None:
    """Link extra NPCs until every sin has MIN_NPCS_PER_SIN, preferring a neighbouring sin's cast."""
    for sin_idx in range(len(sin_chain)):
        at_sin = [a for a in assignments if sin_idx in a.sin_indices]
        while len(at_sin) < MIN_NPCS_PER_SIN:
            adjacent_idx = sin_idx - 1 if sin_idx > 0 else sin_idx + 1
            candidate = None
            if adjacent_idx < len(sin_chain):
                candidate = next(
                    (a for a in assignments if adjacent_idx in a.sin_indices and sin_idx not in a.sin_indices),
                    None,
                )
            if candidate is None:
                candidate = next((a for a in assignments if sin_idx not in a.sin_indices), None)
            if candidate is None:
                break
            candidate.sin_indices.append(sin_idx)
            at_sin.append(candidate)


def ensure_connectivity(sin_chain: list[SinNode], assignments: list[_Assignment]) -> None:
    """Every NPC must share at least one sin with another NPC."""
    for assignment in assignments:
        connected = any(
            other is not assignment and idx in other.sin_indices
            for idx in assignment.sin_indices
            for other in assignments
        )
        if connected:
            continue
        for sin_idx in range(len(sin_chain)):
            if any(other is not assignment and sin_idx in other.sin_indices for other in assignments):
                assignment.sin_indices.append(sin_idx)
                break


def assign_lead_sins(sin_chain: list[SinNode], assignments: list[_Assignment]) -> None:
    """Give each sin, in chain order, a distinct lead NPC.

    A lead's generic facts (including its trust-0 opener) point at the sin it
    leads, so each sin has an entry fact. Sins prefer an NPC already linked to
    them; otherwise a free NPC is linked in. NPCs left over lead with their
    first sin.
    """
    for sin_idx in range(len(sin_chain)):
        lead = next(
            (a for a in assignments if a.lead_sin is None and sin_idx in a.sin_indices),
            None,
        )
        if lead is None:
            lead = next((a for a in assignments if a.lead_sin is None), None)
            if lead is None:
                break
            lead.sin_indices.append(sin_idx)
        lead.lead_sin = sin_idx
    for a in assignments:
        if a.lead_sin is None and a.sin_indices:
            a.lead_sin = a.sin_indices[0]


def _generate_name(archetype: NpcArchetype, rng: SeededRNG) -> str:
    name = rng.pick(archetype.names)
    if archetype.name_prefix:
        return f"{archetype.name_prefix} {name}"
    return name


def _generate_knowledge(
    npc_id: str,
    assignment: _Assignment,
    sin_chain: list[SinNode],
    slots: dict[str, str],
    rng: SeededRNG,
) -> NPCKnowledge:
    archetype = assignment.archetype
    personality = rng.pick(archetype.personality_templates)
    speech_pattern = rng.pick(archetype.speech_pattern_templates)

    facts: list[KnowledgeFact] = []
    for idx, template in enumerate(archetype.fact_templates):
        sin_id = None
        if template.for_sin_level:
            match = next((s for s in sin_chain if s.level == template.for_sin_level), None)
            sin_id = match.id if match else None
        elif assignment.lead_sin is not None and assignment.lead_sin < len(sin_chain):
            sin_id = sin_chain[assignment.lead_sin].id
        facts.append(
            KnowledgeFact(
                id=f"fact-{archetype.role}-{idx}",
                content=fill_template(template.content_pattern, slots),
                tags=list(template.tags),
                min_trust_level=template.min_trust_level,
                required_approach=template.required_approach,
                sin_id=sin_id,
            )
        )
    return NPCKnowledge(npc_id=npc_id, facts=facts, personality=personality, speech_pattern=speech_pattern)


def _conflict_thresholds(archetype: NpcArchetype) -> list[ConflictThreshold]:
    profile = archetype.resist_profile
    return [
        ConflictThreshold(approach=approach, resist_chance=getattr(profile, approach) / 100)
        for approach in _APPROACHES
    ]


def build_relationships(
    npcs: list[NPC],
    sin_chain: list[SinNode],
    assignments: list[_Assignment],
    catalog: TemplateCatalog,
) -> list[NPCRelationship]:
    """Apply per-level role-pair patterns: NPCs on the same sin first, then anyone."""
    relationships: list[NPCRelationship] = []
    indexed = list(enumerate(assignments))

    def _match(candidates, role: str, exclude: int | None) -> int | None:
        for npc_idx, a in candidates:
            if a.archetype.role == role and npc_idx != exclude:
                return npc_idx
        return None

    for sin_idx, sin in enumerate(sin_chain):
        at_sin = [(i, a) for i, a in indexed if sin_idx in a.sin_indices]
        for pattern in catalog.relationships.get(sin.level, []):
            from_role, to_role = pattern.roles
            from_idx = _match(at_sin, from_role, None)
            to_idx = _match(at_sin, to_role, from_idx)
            if from_idx is None:
                from_idx = _match(indexed, from_role, None)
            if to_idx is None:
                to_idx = _match(indexed, to_role, from_idx)
            if from_idx is None or to_idx is None or from_idx == to_idx:
                continue
            from_id, to_id = npcs[from_idx].id, npcs[to_idx].id
            if any(r.from_npc == from_id and r.to_npc == to_id and r.type == pattern.type for r in relationships):
                continue
            relationships.append(
                NPCRelationship(
                    from_npc=from_id,
                    to_npc=to_id,
                    type=pattern.type,
                    secret=pattern.secret,
                    sin_id=sin.id,
                )
            )
    return relationships


def generate_npcs(
    sin_chain: list[SinNode],
    seed: str,
    *,
    has_law: bool | None = None,
    town_name: str | None = None,
    catalog: TemplateCatalog | None = None,
) -> NPCGenerationResult:
    """Generate the cast for a sin chain. The input chain is never mutated."""
    catalog = catalog or get_template_catalog()
    rng = create_rng(f"{seed}-npcs")

    pool = _archetype_pool(catalog, has_law)
    npc_count = min(determine_npc_count(len(sin_chain), rng), len(pool))
    assignments = select_archetypes(sin_chain, npc_count, pool, catalog, rng, has_law=has_law)
    ensure_sin_coverage(sin_chain, assignments)
    ensure_connectivity(sin_chain, assignments)
    assign_lead_sins(sin_chain, assignments)

    slots = derive_chain_slots(seed, town_name=town_name, catalog=catalog)

    npcs: list[NPC] = []
    for idx, assignment in enumerate(assignments):
        archetype = assignment.archetype
        npc_id = f"npc-{archetype.role}-{short_hash(seed, 'npc', archetype.role, idx, length=5)}"
        name = _generate_name(archetype, rng)
        description = rng.pick(archetype.personality_templates)
        npcs.append(
            NPC(
                id=npc_id,
                name=name,
                location_id=f"loc-{archetype.default_location_type}",
                description=description,
                role=archetype.role,
                knowledge=_generate_knowledge(npc_id, assignment, sin_chain, slots, rng),
                conflict_thresholds=_conflict_thresholds(archetype),
            )
        )

    updated_chain: list[SinNode] = []
    for sin_idx, sin in enumerate(sin_chain):
        linked = list(sin.linked_npcs)
        for assignment, npc in zip(assignments, npcs):
            if sin_idx in assignment.sin_indices and npc.id not in linked:
                linked.append(npc.id)
        updated_chain.append(sin.model_copy(update={"linked_npcs": linked}))

    relationships = build_relationships(npcs, updated_chain, assignments, catalog)
    logger.debug(
        "Generated %d NPCs for %r (%s), %d relationships",
        len(npcs),
        seed,
        ", ".join(n.role for n in npcs),
        len(relationships),
    )
    return NPCGenerationResult(npcs=npcs, relationships=relationships, updated_sin_chain=updated_chain)
