"""Tests for the startup check that migrations have been applied."""

import os
import tempfile

import pytest
from sqlalchemy import create_engine, inspect

import secretshare.main as main_module
from secretshare.main import REQUIRED_TABLES, check_database_tables


class TestDatabaseStartup:
    def test_check_database_tables_raises_on_missing_tables(self):
        with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp:
            empty_db_path = tmp.name

        try:
            empty_engine = create_engine(
                f"sqlite:///{empty_db_path}",
                connect_args={"check_same_thread": False},
            )
            assert inspect(empty_engine).get_table_names() == []

            original_engine = main_module.engine
            main_module.engine = empty_engine
            try:
                with pytest.raises(RuntimeError) as exc_info:
                    check_database_tables()

                error_message = str(exc_info.value)
                assert "Database tables missing" in error_message
                assert "alembic upgrade head" in error_message
                for table in REQUIRED_TABLES:
                    assert table in error_message
            finally:
                main_module.engine = original_engine
                empty_engine.dispose()
        finally:
            if os.path.exists(empty_db_path):
                os.unlink(empty_db_path)

    def test_check_database_tables_passes_with_all_tables(self, db_session):
        original_engine = main_module.engine
        main_module.engine = db_session.get_bind()
        try:
            check_database_tables()
        finally:
            main_module.engine = original_engine

    def test_required_tables_exist_after_setup(self, db_session):
        tables = set(inspect(db_session.get_bind()).get_table_names())
        assert REQUIRED_TABLES.issubset(tables)
