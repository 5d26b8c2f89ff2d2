"""Evaluate topic rules against live investigation state."""
from __future__ import annotations

from typing import Iterable

from vineyard.models.town import Topic, TopicRule


def resolve_topics_for_npc(
    npc_id: str,
    topic_rules: Iterable[TopicRule],
    discovered_sin_ids: Iterable[str],
    current_location: str,
    found_clue_ids: Iterable[str] = (),
) -> list[Topic]:
    """Topics ``npc_id`` can offer right now, in rule order.

    Discovery rules unlock when any required sin is discovered; location rules
    only fire for their NPC at their location; clue rules need the clue found
    and, when bound to an NPC, that NPC.
    """
    discovered = set(discovered_sin_ids)
    found = set(found_clue_ids)
    topics: list[Topic] = []
    for rule in topic_rules:
        if rule.kind == "default":
            topics.append(Topic(id=f"{npc_id}-{rule.label}", label=rule.label))
        elif rule.kind == "discovery":
            if any(sin_id in discovered for sin_id in rule.required_sin_ids):
                topics.append(
                    Topic(
                        id=f"{npc_id}-{rule.label}",
                        label=rule.label,
                        requires_discovery=rule.required_sin_ids[0],
                    )
                )
        elif rule.kind == "location":
            if rule.npc_id == npc_id and rule.location_id == current_location:
                topics.append(
                    Topic(
                        id=rule.topic_id or f"{npc_id}-{rule.label}",
                        label=rule.label,
                        location_only=rule.location_id,
                    )
                )
        elif rule.kind == "clue":
            if rule.required_clue_id in found and (rule.npc_id is None or rule.npc_id == npc_id):
                topics.append(
                    Topic(
                        id=f"{npc_id}-clue-{rule.required_clue_id}",
                        label=rule.label,
                        requires_clue=rule.required_clue_id,
                    )
                )
    return topics
