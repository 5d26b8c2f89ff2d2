"""Sin chain generator: a town's moral escalation from pride downward.

A chain of length n always covers the first n levels of SIN_CHAIN_ORDER. Each
level draws one template from its pool; every description in a chain shares the
same town name and the same three personas, so the prose reads as one story.
"""
from __future__ import annotations

import logging

from vineyard.constants import MAX_CHAIN_LENGTH, MIN_CHAIN_LENGTH, SIN_CHAIN_ORDER
from vineyard.models.town import SinNode
from vineyard.text_utils import fill_template
from vineyard.world.rng import SeededRNG, create_rng, short_hash
from vineyard.world.template_loader import get_template_catalog
from vineyard.world.template_models import TemplateCatalog

logger = logging.getLogger(__name__)


def clamp_chain_length(chain_length: int) -> int:
    return max(MIN_CHAIN_LENGTH, min(MAX_CHAIN_LENGTH, int(chain_length)))


def _draw_slots(rng: SeededRNG, catalog: TemplateCatalog, town_name: str | None) -> dict[str, str]:
    flavor = catalog.town
    # The name is always drawn so the stream stays aligned whether or not it is overridden.
    drawn_name = f"{rng.pick(flavor.name_prefixes)} {rng.pick(flavor.name_suffixes)}"
    return {
        "town": town_name or drawn_name,
        "authority": rng.pick(flavor.authority_names),
        "sinner": rng.pick(flavor.sinner_names),
        "victim": rng.pick(flavor.victim_names),
    }


def derive_chain_slots(
    seed: str,
    *,
    town_name: str | None = None,
    catalog: TemplateCatalog | None = None,
) -> dict[str, str]:
    """Replay the chain's persona draws for ``seed`` (town, authority, sinner, victim)."""
    catalog = catalog or get_template_catalog()
    return _draw_slots(create_rng(seed), catalog, town_name)


def generate_sin_chain(
    seed: str,
    chain_length: int,
    *,
    town_name: str | None = None,
    catalog: TemplateCatalog | None = None,
) -> list[SinNode]:
    """Build an ordered, undiscovered sin chain; chain_length is clamped to 3..7."""
    catalog = catalog or get_template_catalog()
    length = clamp_chain_length(chain_length)
    rng = create_rng(seed)
    slots = _draw_slots(rng, catalog, town_name)

    chain: list[SinNode] = []
    for index, level in enumerate(SIN_CHAIN_ORDER[:length]):
        template = rng.pick(catalog.sins_for_level(level))
        chain.append(
            SinNode(
                id=f"sin-{level}-{short_hash(seed, index)}",
                level=level,
                name=template.name,
                description=fill_template(template.description_pattern, slots),
            )
        )
    logger.debug("Sin chain for %r: %s", seed, [n.name for n in chain])
    return chain
