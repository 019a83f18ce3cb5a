from __future__ import annotations

import argparse
import sys
from collections import Counter
from typing import Optional

from alembic.autogenerate import api as ag_api
from alembic.runtime.migration import MigrationContext

from fairdraw.db.engine import make_engine
from fairdraw.models import Base


def _only_draw_tables(name, type_, parent_names) -> bool:
    # Only tables declared by the draw models are compared.
    if type_ == "table":
        return name in Base.metadata.tables
    return True


def _flatten(ops) -> list:
    flat = []
    for op in ops:
        sub_ops = getattr(op, "ops", None)
        if sub_ops:
            flat.extend(_flatten(sub_ops))
        else:
            flat.append(op)
    return flat


def main(argv: Optional[list[str]] = None) -> int:
    """Compare the draw models with the live schema.

    Exit status is 0 when they match, 1 on drift and 2 on errors.
    """
    parser = argparse.ArgumentParser(description="Check the draw schema for drift.")
    parser.add_argument(
        "--all-tables",
        action="store_true",
        help="Also report tables that no draw model declares",
    )
    args = parser.parse_args(argv)

    engine = make_engine()
    url_display = engine.url.render_as_string(hide_password=True)
    opts = {
        "compare_type": True,
        "compare_server_default": True,
        "render_as_batch": engine.dialect.name == "sqlite",
    }
    if not args.all_tables:
        opts["include_name"] = _only_draw_tables
    try:
        with engine.connect() as connection:
            context = MigrationContext.configure(connection=connection, opts=opts)
            migration = ag_api.produce_migrations(context, Base.metadata)
    except Exception as exc:
        print(f"Schema drift check: ERROR for {url_display}: {exc}", file=sys.stderr)
        return 2

    upgrade_ops = migration.upgrade_ops
    if upgrade_ops is None or upgrade_ops.is_empty():
        print(f"Schema drift check: OK for {url_display}.")
        return 0

    changes = _flatten(upgrade_ops.ops)
    kinds = Counter(type(op).__name__ for op in changes)
    summary = ", ".join(f"{name}={count}" for name, count in sorted(kinds.items()))
    print(f"Schema drift check: {len(changes)} differences for {url_display} ({summary}):")
    for op in changes:
        print(f"  - {op}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
