"""``vineyard survey`` — how often does a raw generation pass validation?"""
from __future__ import annotations

from collections import Counter

from vineyard.config import DEFAULT_CHAIN_LENGTH


def register(subparsers) -> None:
    p = subparsers.add_parser("survey", help="Generate a run of seeds and report the pass rate")
    p.add_argument("--prefix", default="survey", help="Seed prefix (default: survey)")
    p.add_argument("--count", type=int, default=20, help="Number of towns (default: 20)")
    p.add_argument(
        "--chain-length",
        type=int,
        default=DEFAULT_CHAIN_LENGTH,
        help=f"Sin chain length (default: {DEFAULT_CHAIN_LENGTH})",
    )
    p.set_defaults(func=run)


def run(args) -> int:
    from vineyard.validation import validate_town
    from vineyard.world.town_generator import TownGenerationConfig, generate_town

    if args.count < 1:
        print("  ERROR: --count must be at least 1")
        return 1

    passed = 0
    failures: Counter[str] = Counter()
    for i in range(args.count):
        seed = f"{args.prefix}-{i}"
        town = generate_town(TownGenerationConfig(seed=seed, chain_length=args.chain_length))
        result = validate_town(town)
        if result.valid:
            passed += 1
            print(f"  OK   {seed}: {town.name}")
        else:
            failures.update(result.error_types())
            print(f"  ERR  {seed}: {town.name} ({', '.join(sorted(set(result.error_types())))})")

    rate = passed / args.count * 100
    print(f"\n  {passed}/{args.count} towns valid ({rate:.0f}%)")
    for error_type, count in failures.most_common():
        print(f"    {error_type}: {count}")
    return 0 if passed == args.count else 1
