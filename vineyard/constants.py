"""Tuning constants for town generation and validation.

Centralizes magic numbers so generators and validators agree on the same
thresholds.
"""
from __future__ import annotations

# --- Sin chain ---
# Escalation ladder, least to most severe. A chain of length n is always the first n levels.
SIN_CHAIN_ORDER: tuple[str, ...] = (
    "pride",
    "injustice",
    "sin",
    "demonic-attacks",
    "false-doctrine",
    "sorcery",
    "hate-and-murder",
)
MIN_CHAIN_LENGTH = 3
MAX_CHAIN_LENGTH = 7
MIN_TEMPLATES_PER_LEVEL = 3

# Placeholders allowed in sin descriptions and fact content
TEMPLATE_SLOTS: frozenset[str] = frozenset({"town", "authority", "sinner", "victim"})

# --- NPC cast ---
NPC_COUNT_SHORT_CHAIN = 5  # chains of MIN_CHAIN_LENGTH
NPC_COUNT_LONG_CHAIN = 7  # chains of 6+
NPC_COUNT_MIN = 5
NPC_COUNT_MAX = 7
LONG_CHAIN_THRESHOLD = 6
MIN_NPCS_PER_SIN = 2

# --- Locations ---
MIN_LOCATIONS = 6
EXTRA_LOCATIONS_OVER_NPCS = 2

# --- Trust thresholds (0..100) ---
ENTRY_TRUST = 0  # facts any stranger can hear
STARTER_TRUST_MAX = 30  # a sin is reachable if some fact needs at most this much trust
SECRET_TRUST_MIN = 60  # facts at or above this need a relationship built first
TOO_SECRETIVE_RATIO = 0.8
