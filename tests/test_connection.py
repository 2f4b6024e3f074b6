"""Tests for the DATABASE_URL engine factory."""
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.pool import NullPool


class TestGetEngine:
    def test_reads_database_url(self):
        with patch("namedsql.connection.create_engine") as mock_create:
            with patch.dict("os.environ", {"DATABASE_URL": "postgresql://test"}):
                from namedsql.connection import get_engine
                engine = get_engine()
            mock_create.assert_called_once_with("postgresql://test", poolclass=NullPool)
            assert engine is mock_create.return_value

    def test_explicit_url_wins(self):
        with patch("namedsql.connection.create_engine") as mock_create:
            with patch.dict("os.environ", {"DATABASE_URL": "postgresql://env"}):
                from namedsql.connection import get_engine
                get_engine("postgresql://other")
            mock_create.assert_called_once_with("postgresql://other", poolclass=NullPool)

    def test_raises_without_database_url(self):
        with patch.dict("os.environ", {}, clear=True):
            from namedsql.connection import get_engine
            with pytest.raises(ValueError, match="DATABASE_URL"):
                get_engine()


class TestOpenDb:
    def test_autocommit_close_and_dispose(self):
        mock_engine = MagicMock()
        mock_engine.connect.return_value.__exit__.return_value = False
        conn = mock_engine.connect.return_value.__enter__.return_value
        with patch("namedsql.connection.create_engine", return_value=mock_engine):
            from namedsql.connection import open_db
            with open_db("postgresql://test") as db:
                assert db is conn.execution_options.return_value
            conn.execution_options.assert_called_once_with(isolation_level="AUTOCOMMIT")
            mock_engine.connect.return_value.__exit__.assert_called_once()
            mock_engine.dispose.assert_called_once()

    def test_disposes_on_exception(self):
        mock_engine = MagicMock()
        mock_engine.connect.return_value.__exit__.return_value = False
        with patch("namedsql.connection.create_engine", return_value=mock_engine):
            from namedsql.connection import open_db
            with pytest.raises(RuntimeError):
                with open_db("postgresql://test"):
                    raise RuntimeError("test error")
            mock_engine.dispose.assert_called_once()

    def test_sqlite_round_trip(self, tmp_path, ctx):
        from namedsql import named_exec, named_get
        from namedsql.connection import open_db
        url = f"sqlite:///{tmp_path / 'app.db'}"
        with open_db(url) as db:
            named_exec(ctx, db, "CREATE TABLE kv (k TEXT PRIMARY KEY, v TEXT)")
            named_exec(ctx, db, "INSERT INTO kv (k, v) VALUES (:k, :v)", {"k": "a", "v": "1"})
        with open_db(url) as db:
            assert named_get(ctx, db, str, "SELECT v FROM kv WHERE k = :k", {"k": "a"}) == "1"
