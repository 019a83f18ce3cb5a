from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import func, inspect, select
from sqlalchemy.engine import Engine

from fairdraw.db.engine import make_engine
from fairdraw.models import Base


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to the requested revision."""
    project_root = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def table_report(engine: Engine) -> dict[str, Optional[int]]:
    """Return the row count of every draw table, or None for missing ones."""
    existing = set(inspect(engine).get_table_names())
    report: dict[str, Optional[int]] = {}
    with engine.connect() as connection:
        for table in Base.metadata.sorted_tables:
            if table.name not in existing:
                report[table.name] = None
                continue
            report[table.name] = connection.scalar(
                select(func.count()).select_from(table)
            )
    return report


def main(argv: Optional[list[str]] = None) -> int:
    """Apply migrations and report the draw tables.

    Exit status is 1 when a table is still missing after the upgrade.
    """
    parser = argparse.ArgumentParser(description="Migrate the draw history store.")
    parser.add_argument("--revision", default="head", help="Target Alembic revision")
    args = parser.parse_args(argv)

    upgrade_db(args.revision)
    engine = make_engine()
    report = table_report(engine)
    print(f"Draw store at {engine.url.render_as_string(hide_password=True)}:")
    for name, rows in report.items():
        print(f"  {name}: {'missing' if rows is None else f'{rows} rows'}")
    return 1 if None in report.values() else 0


if __name__ == "__main__":
    raise SystemExit(main())
