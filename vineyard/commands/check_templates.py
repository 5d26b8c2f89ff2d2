"""``vineyard check-templates`` — load a template pack and report what it holds."""
from __future__ import annotations

from pydantic import ValidationError


def register(subparsers) -> None:
    p = subparsers.add_parser("check-templates", help="Load and validate a template pack")
    p.add_argument("--dir", type=str, help="Template directory (default: VINEYARD_TEMPLATE_DIR or packaged)")
    p.set_defaults(func=run)


def run(args) -> int:
    from vineyard.world.template_loader import load_template_catalog

    try:
        catalog = load_template_catalog(args.dir)
    except FileNotFoundError as exc:
        print(f"  ERROR: {exc}")
        return 1
    except ValidationError as exc:
        print(f"  ERROR: template pack failed validation ({exc.error_count()} error(s))")
        print(exc)
        return 1

    print(f"  OK   sins: {len(catalog.sins)}")
    print(f"  OK   layouts: {len(catalog.layouts)}")
    print(f"  OK   archetypes: {len(catalog.archetypes)}")
    print(f"  OK   relationship patterns: {sum(len(v) for v in catalog.relationships.values())}")
    print(
        f"  OK   town names: {len(catalog.town.name_prefixes)} x {len(catalog.town.name_suffixes)}, "
        f"{len(catalog.town.descriptions)} descriptions"
    )
    return 0
