import tempfile
from pathlib import Path

from sqlalchemy import create_engine, inspect

import secretshare.config as config_module
from alembic import command
from alembic.config import Config
from secretshare.main import REQUIRED_TABLES

ROOT = Path(__file__).resolve().parent.parent


def test_alembic_upgrade_head_on_fresh_sqlite_db():
    original_database_url = config_module.settings.database_url
    try:
        with tempfile.TemporaryDirectory() as tmpdir:
            database_url = f"sqlite:///{Path(tmpdir) / 'fresh.db'}"
            config_module.settings.database_url = database_url

            alembic_cfg = Config(str(ROOT / "alembic.ini"))
            alembic_cfg.set_main_option("script_location", str(ROOT / "alembic"))
            command.upgrade(alembic_cfg, "head")

            engine = create_engine(database_url)
            inspector = inspect(engine)
            tables = set(inspector.get_table_names())
            grant_foreign_keys = inspector.get_foreign_keys("access_grants")
            engine.dispose()

            assert REQUIRED_TABLES.issubset(tables)
            assert grant_foreign_keys == []
    finally:
        config_module.settings.database_url = original_database_url
