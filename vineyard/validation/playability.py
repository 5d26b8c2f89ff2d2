"""Playability: referential integrity, navigability and topic coverage."""
from __future__ import annotations

from vineyard.models.town import ClueTopicRule, DiscoveryTopicRule, LocationTopicRule, TownData
from vineyard.models.validation import ValidationIssue, ValidationResult
from vineyard.world.location_generator import reachable_ids


def validate_playability(town: TownData) -> ValidationResult:
    errors: list[ValidationIssue] = []
    location_ids = {loc.id for loc in town.locations}
    npc_ids = {npc.id for npc in town.npcs}
    clue_ids = {clue.id for clue in town.clues}

    for npc in town.npcs:
        if npc.location_id not in location_ids:
            errors.append(
                ValidationIssue(
                    type="invalid-npc-location",
                    message=(
                        f'NPC "{npc.name}" ({npc.id}) references location "{npc.location_id}" '
                        "which does not exist in the town."
                    ),
                    npc_id=npc.id,
                )
            )

    for rule in town.topic_rules:
        if isinstance(rule, LocationTopicRule):
            if rule.npc_id not in npc_ids:
                errors.append(
                    ValidationIssue(
                        type="invalid-topic-npc",
                        message=f'Location topic rule "{rule.label}" references NPC "{rule.npc_id}" which does not exist.',
                    )
                )
            if rule.location_id not in location_ids:
                errors.append(
                    ValidationIssue(
                        type="invalid-topic-location",
                        message=(
                            f'Location topic rule "{rule.label}" references location "{rule.location_id}" '
                            "which does not exist."
                        ),
                    )
                )
        elif isinstance(rule, ClueTopicRule):
            if rule.required_clue_id not in clue_ids:
                errors.append(
                    ValidationIssue(
                        type="invalid-topic-clue",
                        message=f'Clue topic rule "{rule.label}" references clue "{rule.required_clue_id}" which does not exist.',
                    )
                )
            if rule.npc_id is not None and rule.npc_id not in npc_ids:
                errors.append(
                    ValidationIssue(
                        type="invalid-topic-npc",
                        message=f'Clue topic rule "{rule.label}" references NPC "{rule.npc_id}" which does not exist.',
                    )
                )

    if town.locations:
        adjacency = {loc.id: loc.connections for loc in town.locations}
        visited = reachable_ids(adjacency, town.locations[0].id)
        for loc in town.locations:
            if loc.id not in visited:
                errors.append(
                    ValidationIssue(
                        type="disconnected-location",
                        message=(
                            f'Location "{loc.name}" ({loc.id}) is not reachable from the starting location. '
                            "Players cannot travel there."
                        ),
                    )
                )

    covered = {sin_id for r in town.topic_rules if isinstance(r, DiscoveryTopicRule) for sin_id in r.required_sin_ids}
    for sin in town.sin_chain:
        if sin.id not in covered:
            errors.append(
                ValidationIssue(
                    type="uncovered-sin",
                    message=(
                        f'Sin "{sin.name}" ({sin.id}) has no discovery topic rule referencing it. '
                        "Players cannot unlock conversations about this sin."
                    ),
                    sin_id=sin.id,
                )
            )

    return ValidationResult.from_issues(errors)
