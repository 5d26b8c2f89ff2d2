"""Town orchestrator: seed -> complete TownData, plus the validate-and-retry loop.

Pipeline: name and description, sin chain, NPC cast, locations, NPC placement,
topic rules. ``generate_town`` never validates; ``generate_valid_town`` keeps
re-seeding until the validators accept a town or the attempt budget runs out.
"""
from __future__ import annotations

import logging

from pydantic import BaseModel

from vineyard.config import DEFAULT_CHAIN_LENGTH, GENERATION_MAX_ATTEMPTS
from vineyard.models.town import NPC, Location, TownData
from vineyard.models.validation import ValidationIssue
from vineyard.text_utils import to_kebab_id
from vineyard.validation import validate_town
from vineyard.world.location_generator import generate_locations
from vineyard.world.npc_generator import generate_npcs
from vineyard.world.rng import create_rng
from vineyard.world.sin_chain_generator import generate_sin_chain
from vineyard.world.template_loader import get_template_catalog
from vineyard.world.template_models import TemplateCatalog
from vineyard.world.topic_rules import generate_topic_rules

logger = logging.getLogger(__name__)

# Placeholder location type (from the NPC archetype) -> layout slot types it may occupy.
NPC_LOCATION_TYPES: dict[str, list[str]] = {
    "meeting-house": ["gathering", "church"],
    "jail": ["office"],
    "homestead": ["homestead"],
    "farm": ["homestead", "outskirts"],
    "schoolhouse": ["landmark", "gathering"],
    "chapel": ["church"],
    "general-store": ["store"],
}
_DEFAULT_LOCATION_TYPES = ["gathering"]

# Slot type -> name keywords. Locations don't carry their slot type, so it is read back from the name.
LOCATION_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "church": ("chapel", "church", "worship", "tabernacle", "sanctuary", "faith", "prayer", "meeting"),
    "store": ("store", "mercantile", "trading", "supply", "provision", "emporium", "dry goods"),
    "office": ("sheriff", "marshal", "jail", "office", "stockade", "station", "watch", "guard", "peace"),
    "homestead": (
        "homestead", "farm", "cottage", "ranch", "claim", "orchard", "parsonage",
        "manse", "house", "hut", "herb", "healer",
    ),
    "gathering": ("square", "commons", "main", "bridge", "crossing", "ford", "thoroughfare", "market"),
    "landmark": ("well", "crossroads", "oak", "stone", "circle", "council", "graveyard", "rest", "quiet"),
    "outskirts": (
        "cemetery", "bluff", "lookout", "ridge", "mine", "shaft", "ravine", "gulch", "boot hill", "burying",
    ),
}
# Homesteads are also recognised by their description.
_HOMESTEAD_DESCRIPTION_KEYWORDS = ("dwelling", "farm")

PLACEHOLDER_PREFIX = "loc-"


class TownGenerationConfig(BaseModel):
    seed: str
    chain_length: int = DEFAULT_CHAIN_LENGTH
    name: str | None = None  # override the generated town name
    has_law: bool | None = None  # True seats a sheriff, False keeps one out


class TownGenerationError(RuntimeError):
    """Raised when no attempt produced a town that passes validation."""

    def __init__(self, seed: str, attempts: int, errors: list[ValidationIssue]):
        self.seed = seed
        self.attempts = attempts
        self.errors = list(errors)
        lines = "\n".join(f"  - {e.message}" for e in self.errors)
        super().__init__(f"All {attempts} attempts failed for seed {seed!r}. Last errors:\n{lines}")


def is_location_of_type(location: Location, slot_type: str) -> bool:
    name = location.name.lower()
    if any(k in name for k in LOCATION_TYPE_KEYWORDS.get(slot_type, ())):
        return True
    if slot_type == "homestead":
        desc = location.description.lower()
        return any(k in desc for k in _HOMESTEAD_DESCRIPTION_KEYWORDS)
    return False


def assign_npcs_to_locations(npcs: list[NPC], locations: list[Location]) -> list[NPC]:
    """Replace placeholder location ids with real ones, spreading NPCs across matches.

    Each NPC goes to the least-occupied location of a preferred type (first
    wins on ties), else the least-occupied location overall.
    """
    if not locations:
        return list(npcs)
    occupancy = {loc.id: 0 for loc in locations}
    placed: list[NPC] = []
    for npc in npcs:
        loc_type = npc.location_id.removeprefix(PLACEHOLDER_PREFIX)
        preferred = NPC_LOCATION_TYPES.get(loc_type, _DEFAULT_LOCATION_TYPES)

        best: Location | None = None
        best_count = None
        for loc in locations:
            count = occupancy[loc.id]
            if any(is_location_of_type(loc, t) for t in preferred) and (best_count is None or count < best_count):
                best, best_count = loc, count
        if best is None:
            for loc in locations:
                count = occupancy[loc.id]
                if best_count is None or count < best_count:
                    best, best_count = loc, count
        if best is None:
            best = locations[0]

        occupancy[best.id] += 1
        placed.append(npc.model_copy(update={"location_id": best.id}))
    return placed


def generate_town(config: TownGenerationConfig, *, catalog: TemplateCatalog | None = None) -> TownData:
    """Generate a complete town for ``config.seed``. Same config, same town. No validation."""
    catalog = catalog or get_template_catalog()
    seed = config.seed
    rng = create_rng(seed)

    flavor = catalog.town
    name = config.name or f"{rng.pick(flavor.name_prefixes)} {rng.pick(flavor.name_suffixes)}"
    description = rng.pick(flavor.descriptions)

    raw_chain = generate_sin_chain(seed, config.chain_length, town_name=name, catalog=catalog)
    cast = generate_npcs(raw_chain, seed, has_law=config.has_law, town_name=name, catalog=catalog)
    locations = generate_locations(len(cast.npcs), f"{seed}-loc", catalog=catalog)
    npcs = assign_npcs_to_locations(cast.npcs, locations)
    topic_rules = generate_topic_rules(npcs, cast.updated_sin_chain, locations, clues=[])

    town = TownData(
        id=to_kebab_id(name),
        name=name,
        description=description,
        locations=locations,
        npcs=npcs,
        sin_chain=cast.updated_sin_chain,
        clues=[],
        topic_rules=topic_rules,
        relationships=cast.relationships,
        has_law=config.has_law,
    )
    logger.debug(
        "Generated town %s (%s): %d sins, %d NPCs, %d locations",
        town.name,
        seed,
        len(town.sin_chain),
        len(town.npcs),
        len(town.locations),
    )
    return town


def attempt_seed(seed: str, attempt: int) -> str:
    """Seed used for a given attempt: the base seed first, then ``<seed>-retry-<n>``."""
    return seed if attempt == 0 else f"{seed}-retry-{attempt}"


def generate_valid_town(
    config: TownGenerationConfig,
    max_attempts: int | None = None,
    *,
    catalog: TemplateCatalog | None = None,
) -> TownData:
    """Generate towns until one passes ``validate_town``.

    Raises TownGenerationError with the last attempt's errors once
    ``max_attempts`` (default VINEYARD_MAX_ATTEMPTS) are spent.
    """
    if max_attempts is None:
        max_attempts = GENERATION_MAX_ATTEMPTS
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_errors: list[ValidationIssue] = []
    for attempt in range(max_attempts):
        candidate = generate_town(
            config.model_copy(update={"seed": attempt_seed(config.seed, attempt)}),
            catalog=catalog,
        )
        result = validate_town(candidate)
        if result.valid:
            if result.warnings:
                logger.warning(
                    "Town %r passed validation with %d warning(s): %s",
                    candidate.name,
                    len(result.warnings),
                    "; ".join(w.message for w in result.warnings),
                )
            return candidate

        last_errors = result.errors
        logger.warning(
            "Town attempt %d/%d failed with %d error(s): %s",
            attempt + 1,
            max_attempts,
            len(result.errors),
            "; ".join(e.message for e in result.errors),
        )

    raise TownGenerationError(config.seed, max_attempts, last_errors)
