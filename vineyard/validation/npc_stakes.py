"""NPC stakes: every NPC must matter to the investigation and be approachable."""
from __future__ import annotations

from vineyard.constants import ENTRY_TRUST, MIN_NPCS_PER_SIN, SECRET_TRUST_MIN, TOO_SECRETIVE_RATIO
from vineyard.models.town import TownData
from vineyard.models.validation import ValidationIssue, ValidationResult


def _npc_sins(town: TownData) -> dict[str, set[str]]:
    """npc id -> ids of the sins listing it in linked_npcs."""
    out: dict[str, set[str]] = {}
    for sin in town.sin_chain:
        for npc_id in sin.linked_npcs:
            out.setdefault(npc_id, set()).add(sin.id)
    return out


def validate_npc_stakes(town: TownData) -> ValidationResult:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    for npc in town.npcs:
        if npc.knowledge is None:
            errors.append(
                ValidationIssue(
                    type="missing-knowledge",
                    message=f'NPC "{npc.name}" ({npc.id}) has no knowledge. The NPC cannot take part in conversations.',
                    npc_id=npc.id,
                )
            )

    for npc in town.npcs:
        if npc.knowledge is None:
            continue
        if not any(f.sin_id is not None for f in npc.knowledge.facts):
            errors.append(
                ValidationIssue(
                    type="no-stakes",
                    message=(
                        f'NPC "{npc.name}" ({npc.id}) has no facts linked to any sin. '
                        "The NPC has no stakes in the investigation."
                    ),
                    npc_id=npc.id,
                )
            )

    for sin in town.sin_chain:
        if len(sin.linked_npcs) < MIN_NPCS_PER_SIN:
            errors.append(
                ValidationIssue(
                    type="insufficient-npc-coverage",
                    message=(
                        f'Sin "{sin.name}" ({sin.id}) has only {len(sin.linked_npcs)} linked NPC(s). '
                        f"At least {MIN_NPCS_PER_SIN} are required for a meaningful investigation."
                    ),
                    sin_id=sin.id,
                )
            )

    npc_sins = _npc_sins(town)
    for npc in town.npcs:
        mine = npc_sins.get(npc.id)
        if not mine:
            errors.append(
                ValidationIssue(
                    type="disconnected-npc",
                    message=(
                        f'NPC "{npc.name}" ({npc.id}) is not linked to any sin in the chain. '
                        "The NPC is disconnected from the investigation."
                    ),
                    npc_id=npc.id,
                )
            )
            continue
        shares = any(other_id != npc.id and mine & other for other_id, other in npc_sins.items())
        if not shares:
            errors.append(
                ValidationIssue(
                    type="isolated-npc",
                    message=(
                        f'NPC "{npc.name}" ({npc.id}) does not share any sin with another NPC. '
                        "The NPC is isolated in the investigation graph."
                    ),
                    npc_id=npc.id,
                )
            )

    for npc in town.npcs:
        if npc.knowledge is None:
            continue
        if not any(f.min_trust_level == ENTRY_TRUST for f in npc.knowledge.facts):
            errors.append(
                ValidationIssue(
                    type="no-entry-point",
                    message=(
                        f'NPC "{npc.name}" ({npc.id}) has no facts at trust level 0. '
                        "Players cannot begin a conversation with this NPC."
                    ),
                    npc_id=npc.id,
                )
            )

    for npc in town.npcs:
        if npc.knowledge is None or not npc.knowledge.facts:
            continue
        facts = npc.knowledge.facts
        ratio = sum(1 for f in facts if f.min_trust_level >= SECRET_TRUST_MIN) / len(facts)
        if ratio > TOO_SECRETIVE_RATIO:
            warnings.append(
                ValidationIssue(
                    type="too-secretive",
                    message=(
                        f'NPC "{npc.name}" ({npc.id}) has {round(ratio * 100)}% of facts at trust level '
                        f"{SECRET_TRUST_MIN}+. This NPC may be too hard for players to crack."
                    ),
                    npc_id=npc.id,
                )
            )

    return ValidationResult.from_issues(errors, warnings)
