#!/usr/bin/env python3
"""
Tests for LibBuilder - generated library update and build.

External tools are never started; ``subprocess.run`` is patched and the
commands handed to it are inspected.
"""
import subprocess
import pytest
from pathlib import Path
from unittest.mock import patch

from counterpart.builders.libbuilder import LibBuilder
from counterpart.core.config import ConnectionSettings
from counterpart.core.exceptions import BuildError, ConfigurationError, GenerateError
from counterpart.core.paths import GENERATOR_BINARY


RUN = "counterpart.builders.base.subprocess.run"


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def connection():
    return ConnectionSettings("sql01", "Wiggin", "svc", "secret")


@pytest.fixture
def generator_repo(tmp_path):
    repo = tmp_path / "wyrm"
    repo.mkdir()
    return repo


class TestBuild:
    """Tests for LibBuilder.build."""

    def test_build_command(self, repo_paths):
        cmd = LibBuilder(repo_paths).build_command(Path("/tmp/out"))

        assert cmd[0] == "msbuild"
        assert cmd[1] == str(repo_paths.lib_project)
        assert "/p:OutputPath=/tmp/out" in cmd

    def test_build_success(self, repo_paths):
        with patch(RUN, return_value=_completed()) as run:
            LibBuilder(repo_paths).build()

        cmd = run.call_args.args[0]
        assert cmd[0] == "msbuild"
        assert run.call_args.kwargs["capture_output"] is True

    def test_build_output_dir_is_removed(self, repo_paths):
        with patch(RUN, return_value=_completed()) as run:
            LibBuilder(repo_paths).build()

        output_arg = next(a for a in run.call_args.args[0] if a.startswith("/p:OutputPath="))
        assert not Path(output_arg.split("=", 1)[1]).exists()

    def test_build_failure_carries_stdout(self, repo_paths):
        failed = _completed(1, stdout="Order.cs(3,1): error CS1002: ; expected\n")

        with patch(RUN, return_value=failed):
            with pytest.raises(BuildError) as exc_info:
                LibBuilder(repo_paths).build()

        assert "exit status 1" in str(exc_info.value)
        assert exc_info.value.output == "Order.cs(3,1): error CS1002: ; expected"

    def test_missing_msbuild(self, repo_paths):
        with patch(RUN, side_effect=FileNotFoundError("msbuild")):
            with pytest.raises(BuildError, match="failed to start 'msbuild'"):
                LibBuilder(repo_paths).build()


class TestUpdate:
    """Tests for LibBuilder.update."""

    def test_requires_generator_repo(self, repo_paths, connection):
        builder = LibBuilder(repo_paths, connection=connection)

        with pytest.raises(ConfigurationError, match="Generator repository"):
            builder.update()

    def test_requires_connection(self, repo_paths, generator_repo):
        builder = LibBuilder(repo_paths, generator_repo=generator_repo)

        with pytest.raises(ConfigurationError, match="Database server"):
            builder.update()

    def test_uses_dotnet_run_without_binary(self, repo_paths, generator_repo, connection):
        cmd = LibBuilder(repo_paths, generator_repo, connection).update_command()

        assert cmd[:3] == ["dotnet", "run", "-p"]
        assert cmd[3].endswith("Wyrm.csproj")
        assert cmd[4:6] == ["--", "generate"]
        assert cmd[-2:] == ["-o", str(repo_paths.lib)]
        assert "secret" in cmd

    def test_uses_prebuilt_binary(self, repo_paths, generator_repo, connection):
        binary = generator_repo / GENERATOR_BINARY
        binary.parent.mkdir(parents=True)
        binary.touch()

        cmd = LibBuilder(repo_paths, generator_repo, connection).update_command()

        assert cmd[:3] == ["dotnet", str(binary), "generate"]

    def test_update_failure(self, repo_paths, generator_repo, connection):
        with patch(RUN, return_value=_completed(2, stderr="login failed")):
            with pytest.raises(GenerateError) as exc_info:
                LibBuilder(repo_paths, generator_repo, connection).update()

        assert exc_info.value.output == "login failed"

    def test_update_success(self, repo_paths, generator_repo, connection):
        with patch(RUN, return_value=_completed()) as run:
            LibBuilder(repo_paths, generator_repo, connection).update()

        assert run.call_args.args[0][0] == "dotnet"
