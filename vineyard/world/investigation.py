"""Investigation seeding: the state of the sin chain when the Dogs ride in."""
from __future__ import annotations

from vineyard.models.town import SinNode


def start_investigation(sin_chain: list[SinNode]) -> list[SinNode]:
    """Copy of the chain with its surface sin (the first node) discovered."""
    return [
        sin.model_copy(update={"discovered": True}) if idx == 0 else sin
        for idx, sin in enumerate(sin_chain)
    ]


def discovered_sin_ids(sin_chain: list[SinNode]) -> list[str]:
    return [sin.id for sin in sin_chain if sin.discovered]
