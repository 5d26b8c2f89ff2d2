"""``vineyard validate`` — run the town validators over a saved town."""
from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError


def register(subparsers) -> None:
    p = subparsers.add_parser("validate", help="Validate a town JSON file")
    p.add_argument("path", help="Path to a TownData JSON file")
    p.set_defaults(func=run)


def run(args) -> int:
    from vineyard.models.town import TownData
    from vineyard.validation import validate_town

    path = Path(args.path)
    if not path.exists():
        print(f"  ERROR: Town file not found: {path}")
        return 1
    try:
        town = TownData.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        print(f"  ERROR: {path} is not a valid town: {exc.error_count()} schema error(s)")
        print(exc)
        return 1

    result = validate_town(town)
    for issue in result.errors:
        print(f"  ERR  [{issue.type}] {issue.message}")
    for issue in result.warnings:
        print(f"  WARN [{issue.type}] {issue.message}")
    if result.valid:
        print(f"  OK   {town.name}: valid ({len(result.warnings)} warning(s))")
        return 0
    print(f"  {town.name}: {len(result.errors)} error(s)")
    return 1
