"""The alembic history must produce the schema the SQL store maps."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from linkdash.infrastructure.db import Base
import linkdash.domain.models  # noqa: F401

ROOT = Path(__file__).resolve().parents[1]


def alembic_config(url: str) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def test_upgrade_matches_models(tmp_path):
    url = f"sqlite:///{tmp_path / 'linkdash.db'}"
    command.upgrade(alembic_config(url), "head")

    inspector = inspect(create_engine(url))
    assert set(inspector.get_table_names()) == set(Base.metadata.tables) | {"alembic_version"}
    for name, table in Base.metadata.tables.items():
        migrated = {c["name"] for c in inspector.get_columns(name)}
        assert migrated == {c.name for c in table.columns}, name


def test_downgrade_to_base(tmp_path):
    url = f"sqlite:///{tmp_path / 'linkdash.db'}"
    cfg = alembic_config(url)
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")
    assert inspect(create_engine(url)).get_table_names() == ["alembic_version"]
