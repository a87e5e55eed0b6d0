"""Tests for the CLI entry point and the exception-to-exit-code mapping."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from nearbuild import exit_codes
from nearbuild.app import main
from nearbuild.exceptions import (
    ArtifactNotFound,
    BuildError,
    ConfigError,
    ContainerError,
    DirectoryUnreadable,
    InvalidUsageError,
    LaunchFailure,
    LocalBuildFailed,
    NearBuildError,
    NonZeroExit,
    PathConversionFailure,
    ToolchainNotFound,
)


class TestExitCodes:
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (NearBuildError("x"), exit_codes.EXIT_GENERIC_FAILURE),
            (InvalidUsageError("x"), exit_codes.EXIT_INVALID_USAGE),
            (ConfigError("x"), exit_codes.EXIT_GENERIC_FAILURE),
            (LaunchFailure("x"), exit_codes.EXIT_CONTAINER_FAILURE),
            (NonZeroExit("x", returncode=2), exit_codes.EXIT_CONTAINER_FAILURE),
            (ToolchainNotFound("x"), exit_codes.EXIT_BUILD_FAILED),
            (LocalBuildFailed("x"), exit_codes.EXIT_BUILD_FAILED),
            (ArtifactNotFound(Path("/d"), "wasm"), exit_codes.EXIT_ARTIFACT_NOT_FOUND),
            (
                DirectoryUnreadable(Path("/d"), FileNotFoundError("missing")),
                exit_codes.EXIT_DIRECTORY_UNREADABLE,
            ),
            (PathConversionFailure("/d/\udcff"), exit_codes.EXIT_PATH_CONVERSION),
        ],
    )
    def test_exit_code(self, exc: NearBuildError, code: int) -> None:
        assert exc.exit_code == code

    def test_override(self) -> None:
        assert NearBuildError("x", exit_code=42).exit_code == 42

    def test_hierarchy(self) -> None:
        assert issubclass(LaunchFailure, ContainerError)
        assert issubclass(NonZeroExit, ContainerError)
        assert issubclass(ContainerError, BuildError)
        assert not issubclass(LocalBuildFailed, ContainerError)

    def test_messages(self) -> None:
        missing = ArtifactNotFound(Path("/w/target/near"), "wasm")
        assert str(missing) == "No .wasm artifact found in directory: `/w/target/near`."
        unreadable = DirectoryUnreadable(Path("/w/target/near"), FileNotFoundError("gone"))
        assert "No artifacts directory found" in str(unreadable)
        assert isinstance(unreadable.cause, FileNotFoundError)


class TestMain:
    @pytest.fixture(autouse=True)
    def _no_signal_handlers(self):
        with patch("nearbuild.app._setup_signal_handlers"):
            yield

    def test_near_build_error_maps_to_exit_code(self, capsys, plain_output) -> None:
        with patch("nearbuild.app.app", side_effect=ArtifactNotFound(Path("/d"), "wasm")):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == exit_codes.EXIT_ARTIFACT_NOT_FOUND
        assert "No .wasm artifact found" in capsys.readouterr().err

    def test_unexpected_error_writes_crash_log(
        self, isolated_config: Path, capsys, plain_output
    ) -> None:
        with patch("nearbuild.app.app", side_effect=RuntimeError("kaboom")):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == exit_codes.EXIT_GENERIC_FAILURE
        assert "Unexpected error. Debug log:" in capsys.readouterr().err
        logs = list((isolated_config / "data" / "nearbuild" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "kaboom" in logs[0].read_text()

    def test_keyboard_interrupt(self, capsys) -> None:
        with patch("nearbuild.app.app", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 130
        assert "Cancelled." in capsys.readouterr().err
