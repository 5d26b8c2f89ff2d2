"""``vineyard generate`` — build a town for a seed and emit it as JSON."""
from __future__ import annotations

import argparse
from pathlib import Path

from vineyard.config import DEFAULT_CHAIN_LENGTH


def register(subparsers) -> None:
    p = subparsers.add_parser("generate", help="Generate a town as JSON")
    p.add_argument("--seed", required=True, help="Seed string; same seed, same town")
    p.add_argument(
        "--chain-length",
        type=int,
        default=DEFAULT_CHAIN_LENGTH,
        help=f"Sin chain length, clamped to 3..7 (default: {DEFAULT_CHAIN_LENGTH})",
    )
    p.add_argument("--name", type=str, help="Override the generated town name")
    p.add_argument(
        "--law",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force a sheriff into the cast (--law) or keep one out (--no-law)",
    )
    p.add_argument("--max-attempts", type=int, help="Retry budget (default: VINEYARD_MAX_ATTEMPTS)")
    p.add_argument("--unchecked", action="store_true", help="Skip validation and retries")
    p.add_argument("--out", type=str, help="Write JSON here instead of stdout")
    p.set_defaults(func=run)


def run(args) -> int:
    from vineyard.world.town_generator import (
        TownGenerationConfig,
        TownGenerationError,
        generate_town,
        generate_valid_town,
    )

    config = TownGenerationConfig(
        seed=args.seed,
        chain_length=args.chain_length,
        name=args.name,
        has_law=args.law,
    )
    try:
        if args.unchecked:
            town = generate_town(config)
        else:
            town = generate_valid_town(config, max_attempts=args.max_attempts)
    except TownGenerationError as exc:
        print(f"  ERROR: {exc}")
        return 1
    except ValueError as exc:
        print(f"  ERROR: {exc}")
        return 1

    payload = town.model_dump_json(indent=2)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload + "\n", encoding="utf-8")
        print(f"  OK: {town.name} ({len(town.sin_chain)} sins, {len(town.npcs)} NPCs) -> {out}")
    else:
        print(payload)
    return 0
