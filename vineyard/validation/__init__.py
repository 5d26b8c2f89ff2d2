"""Town validators. Each returns a ValidationResult and never raises."""
from __future__ import annotations

from vineyard.models.town import TownData
from vineyard.models.validation import ValidationResult
from vineyard.validation.npc_stakes import validate_npc_stakes
from vineyard.validation.playability import validate_playability
from vineyard.validation.sin_chain import validate_sin_chain_discoverable


def validate_town(town: TownData) -> ValidationResult:
    """Run every validator; valid only if all pass. Errors keep validator order."""
    return ValidationResult.merge(
        validate_sin_chain_discoverable(town),
        validate_npc_stakes(town),
        validate_playability(town),
    )


__all__ = [
    "validate_npc_stakes",
    "validate_playability",
    "validate_sin_chain_discoverable",
    "validate_town",
]
