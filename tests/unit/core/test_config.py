"""
Tests for config module.

Covers layout resolution, config file loading and override precedence.
"""
import pytest
from pathlib import Path

from counterpart.core.config import (
    ConnectionSettings,
    RepoLayout,
    Settings,
    load_settings,
)
from counterpart.core.exceptions import ConfigurationError
from counterpart.core.paths import LIB_EXCLUSIONS


class TestRepoLayout:
    """Tests for RepoLayout."""

    def test_default_segments(self, tmp_path):
        paths = RepoLayout().resolve(tmp_path)

        assert paths.tables == tmp_path.resolve() / "WigginDB" / "Tables"
        assert paths.policies == tmp_path.resolve() / "WigginDB" / "Security Policies"
        assert paths.functions == tmp_path.resolve() / "WigginDB" / "Functions"
        assert paths.schemas == tmp_path.resolve() / "WigginDB" / "Security" / "Schemas"
        assert paths.lib == tmp_path.resolve() / "Intility.Wiggin" / "WigginLib"
        assert paths.lib_project.name == "Intility.Wiggin.csproj"
        assert paths.lib_exclusions == LIB_EXCLUSIONS

    def test_from_dict_overrides_selected_keys(self):
        layout = RepoLayout.from_dict({"tables": "db/tables"})

        assert layout.tables == Path("db/tables")
        assert layout.policies == RepoLayout().policies

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError, match="Unknown layout keys: views"):
            RepoLayout.from_dict({"views": "db/views"})

    def test_from_dict_rejects_absolute_paths(self, tmp_path):
        with pytest.raises(ConfigurationError, match="must be relative"):
            RepoLayout.from_dict({"tables": str(tmp_path)})

    def test_extra_exclusions_extend_defaults(self):
        layout = RepoLayout.from_dict(None, ["Migrations"])

        assert "Migrations" in layout.lib_exclusions
        assert LIB_EXCLUSIONS <= layout.lib_exclusions


class TestConnectionSettings:
    """Tests for ConnectionSettings."""

    def test_url(self):
        conn = ConnectionSettings("sql01", "Wiggin", "svc", "secret")
        url = conn.url()

        assert url.drivername == "mssql+pymssql"
        assert url.host == "sql01"
        assert url.database == "Wiggin"
        assert url.username == "svc"
        assert url.password == "secret"

    def test_sqlcmd_args(self):
        conn = ConnectionSettings("sql01", "Wiggin", "svc", "secret")

        assert conn.sqlcmd_args() == ["-S", "sql01", "-d", "Wiggin", "-U", "svc", "-P", "secret"]

    def test_password_not_in_repr(self):
        assert "secret" not in repr(ConnectionSettings("sql01", "Wiggin", "svc", "secret"))


class TestLoadSettings:
    """Tests for load_settings."""

    def test_repo_required(self):
        with pytest.raises(ConfigurationError, match="Repository path is not set"):
            load_settings()

    def test_repo_must_exist(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not a directory"):
            load_settings(repo=str(tmp_path / "missing"))

    def test_minimal(self, tmp_path):
        settings = load_settings(repo=str(tmp_path))

        assert settings.repo_root == tmp_path
        assert settings.connection is None
        assert settings.generator_repo is None
        assert settings.layout == RepoLayout()

    def test_config_file(self, tmp_path):
        repo = tmp_path / "repo"
        repo.mkdir()
        config = tmp_path / "counterpart.yaml"
        config.write_text(
            f"""
repo: {repo}
generator_repo: {tmp_path / "wyrm"}
database:
  server: sql01
  name: Wiggin
  uid: svc
  pwd: secret
layout:
  tables: db/tables
extra_lib_exclusions:
  - Migrations
""",
            encoding="utf-8",
        )

        settings = load_settings(config)

        assert settings.repo_root == repo
        assert settings.generator_repo == tmp_path / "wyrm"
        assert settings.connection == ConnectionSettings("sql01", "Wiggin", "svc", "secret")
        assert settings.paths.tables == repo.resolve() / "db" / "tables"
        assert "Migrations" in settings.layout.lib_exclusions

    def test_overrides_win_over_file(self, tmp_path):
        config = tmp_path / "counterpart.yaml"
        config.write_text(
            "repo: /does/not/matter\ndatabase:\n  server: a\n  name: b\n  uid: c\n  pwd: d\n",
            encoding="utf-8",
        )

        settings = load_settings(config, repo=str(tmp_path), server="override")

        assert settings.repo_root == tmp_path
        assert settings.connection.server == "override"
        assert settings.connection.database == "b"

    def test_incomplete_connection(self, tmp_path):
        with pytest.raises(ConfigurationError, match="missing: uid, pwd"):
            load_settings(repo=str(tmp_path), server="sql01", database="Wiggin")

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("repo: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_settings(config)

    def test_non_mapping_yaml(self, tmp_path):
        config = tmp_path / "list.yaml"
        config.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(config)


class TestSettings:
    """Tests for Settings accessors."""

    def test_connection_string_wins(self, tmp_path):
        settings = Settings(
            repo_root=tmp_path,
            connection=ConnectionSettings("a", "b", "c", "d"),
            connection_string="mssql+pymssql://x:y@host/db",
        )

        assert settings.database_url() == "mssql+pymssql://x:y@host/db"

    def test_database_url_from_connection(self, tmp_path):
        settings = Settings(repo_root=tmp_path, connection=ConnectionSettings("a", "b", "c", "d"))

        assert settings.database_url().host == "a"

    def test_database_url_missing(self, tmp_path):
        with pytest.raises(ConfigurationError, match="No database connection"):
            Settings(repo_root=tmp_path).database_url()
