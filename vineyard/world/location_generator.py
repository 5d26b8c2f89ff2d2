"""Location generator: a connected town map from a fixed layout template.

Coordinates come from the layout so maps stay readable; variety comes from
which layout is drawn and which name/description variant each slot gets.
"""
from __future__ import annotations

import logging
from collections import deque

from vineyard.constants import EXTRA_LOCATIONS_OVER_NPCS, MIN_LOCATIONS
from vineyard.models.town import Location
from vineyard.text_utils import to_kebab_id
from vineyard.world.rng import create_rng
from vineyard.world.template_loader import get_template_catalog
from vineyard.world.template_models import TemplateCatalog, slot_keys

logger = logging.getLogger(__name__)


def location_slot_count(npc_count: int, template_size: int) -> int:
    """NPCs + 2, at least MIN_LOCATIONS, never more than the layout offers."""
    target = min(npc_count + EXTRA_LOCATIONS_OVER_NPCS, template_size)
    return min(max(target, MIN_LOCATIONS), template_size)


def _unique_id(base: str, taken: set[str]) -> str:
    candidate = base
    n = 2
    while candidate in taken:
        candidate = f"{base}-{n}"
        n += 1
    return candidate


def reachable_ids(adjacency: dict[str, list[str]], start_id: str) -> set[str]:
    """BFS over an id -> connected ids mapping from ``start_id``."""
    visited = {start_id}
    queue = deque([start_id])
    while queue:
        for conn in adjacency.get(queue.popleft(), []):
            if conn not in visited:
                visited.add(conn)
                queue.append(conn)
    return visited


def _ensure_connected(drafts: list[dict]) -> None:
    """Link every location unreachable from the first one straight to it."""
    if len(drafts) <= 1:
        return
    hub = drafts[0]
    visited = reachable_ids({d["id"]: d["connections"] for d in drafts}, hub["id"])
    for draft in drafts[1:]:
        if draft["id"] not in visited:
            hub["connections"].append(draft["id"])
            draft["connections"].append(hub["id"])
            visited.add(draft["id"])


def generate_locations(
    npc_count: int,
    seed: str,
    *,
    catalog: TemplateCatalog | None = None,
) -> list[Location]:
    """Build a symmetric, connected location graph sized for ``npc_count`` NPCs."""
    catalog = catalog or get_template_catalog()
    rng = create_rng(seed)
    layout = rng.pick(catalog.layouts)

    keys = slot_keys(layout.slots)
    used = location_slot_count(npc_count, len(layout.slots))
    selected_keys = set(keys[:used])

    drafts: list[dict] = []
    key_to_id: dict[str, str] = {}
    taken: set[str] = set()
    for key, slot in zip(keys[:used], layout.slots[:used]):
        name = rng.pick(slot.name_variants)
        description = rng.pick(slot.description_variants)
        loc_id = _unique_id(to_kebab_id(name) or key, taken)
        taken.add(loc_id)
        key_to_id[key] = loc_id
        drafts.append(
            {
                "id": loc_id,
                "name": name,
                "description": description,
                "x": slot.x,
                "y": slot.y,
                "connections": [c for c in slot.connections if c in selected_keys],
            }
        )

    for draft in drafts:
        resolved: list[str] = []
        for key in draft["connections"]:
            target = key_to_id.get(key)
            if target and target != draft["id"] and target not in resolved:
                resolved.append(target)
        draft["connections"] = resolved

    by_id = {d["id"]: d for d in drafts}
    for draft in drafts:
        for conn in list(draft["connections"]):
            other = by_id[conn]
            if draft["id"] not in other["connections"]:
                other["connections"].append(draft["id"])

    _ensure_connected(drafts)
    logger.debug("Layout %s for %r: %d locations", layout.id, seed, len(drafts))
    return [Location(**d) for d in drafts]
