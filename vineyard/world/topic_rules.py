"""Topic rule generation: which conversation topics exist and what unlocks them."""
from __future__ import annotations

import logging
from typing import Iterable

from vineyard.models.town import (
    NPC,
    Clue,
    ClueTopicRule,
    DefaultTopicRule,
    DiscoveryTopicRule,
    Location,
    LocationTopicRule,
    SinNode,
    TopicRule,
)
from vineyard.text_utils import to_kebab_id

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_LABELS: tuple[str, ...] = ("greeting", "the-town")

# NPC role -> label of the topic they only raise at home
ROLE_TOPIC_LABELS: dict[str, str] = {
    "steward": "governance",
    "sheriff": "law-records",
    "healer": "remedies",
    "farmer": "crop-talk",
    "teacher": "school-matters",
    "preacher": "chapel-doctrine",
    "merchant": "store-goods",
    "elder": "old-days",
    "widow": "home-life",
}


def sin_topic_label(sin: SinNode) -> str:
    """Discovery topic label for a sin: its name in kebab-case."""
    return to_kebab_id(sin.name)


def location_topic_label(role: str) -> str:
    role_key = to_kebab_id(role)
    if not role_key:
        return "local-knowledge"
    return ROLE_TOPIC_LABELS.get(role_key, f"{role_key}-matters")


def generate_topic_rules(
    npcs: list[NPC],
    sin_chain: list[SinNode],
    locations: list[Location],
    clues: Iterable[Clue] = (),
) -> list[TopicRule]:
    """Build the town's topic rules.

    Order: defaults, one discovery rule per sin, one consequence rule per
    adjacent sin pair, one location rule per placed NPC, one rule per clue.
    A final sweep adds a ``hidden-<label>`` rule for any sin left uncovered.
    """
    rules: list[TopicRule] = [DefaultTopicRule(label=label) for label in DEFAULT_TOPIC_LABELS]

    for sin in sin_chain:
        rules.append(DiscoveryTopicRule(label=sin_topic_label(sin), required_sin_ids=[sin.id]))

    for current, nxt in zip(sin_chain, sin_chain[1:]):
        rules.append(
            DiscoveryTopicRule(
                label=f"{sin_topic_label(current)}-consequence",
                required_sin_ids=[current.id, nxt.id],
            )
        )

    location_ids = {loc.id for loc in locations}
    for npc in npcs:
        if npc.location_id not in location_ids:
            continue
        label = location_topic_label(npc.role)
        rules.append(
            LocationTopicRule(
                label=label,
                npc_id=npc.id,
                location_id=npc.location_id,
                topic_id=f"{npc.id}-{label}",
            )
        )

    for clue in clues:
        rules.append(ClueTopicRule(label=to_kebab_id(clue.name) or clue.id, required_clue_id=clue.id))

    covered = {sin_id for r in rules if isinstance(r, DiscoveryTopicRule) for sin_id in r.required_sin_ids}
    for sin in sin_chain:
        if sin.id not in covered:
            rules.append(DiscoveryTopicRule(label=f"hidden-{sin_topic_label(sin)}", required_sin_ids=[sin.id]))

    logger.debug("Generated %d topic rules", len(rules))
    return rules
