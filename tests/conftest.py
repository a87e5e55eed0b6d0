"""Shared test fixtures for nearbuild.

Provides reusable fixtures for creating isolated config environments,
throw-away contract projects, stand-in builders, managing output state, and
running CLI commands. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from nearbuild.build.base import Builder
from nearbuild.exceptions import BuildError
from nearbuild.models import ArtifactDescriptor, BuildOptions, BuildSettings
from nearbuild.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config, clears all NEARBUILD_*
    environment variables and changes the working directory to tmp_path.
    """
    monkeypatch.setattr("nearbuild.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "NEARBUILD_IMAGE",
        "NEARBUILD_IMAGE_TAG",
        "NEARBUILD_CONTAINER_RUNTIME",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Contract project fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def contract_project(tmp_path: Path) -> Path:
    """A minimal contract project directory with a Cargo.toml."""
    root = tmp_path / "contract"
    root.mkdir()
    (root / "Cargo.toml").write_text('[package]\nname = "contract"\nversion = "0.1.0"\n')
    return root


@pytest.fixture
def write_artifact() -> Callable[..., Path]:
    """Return a helper that drops a fake artifact into ``<root>/target/near``."""

    def _write(root: Path, name: str = "contract.wasm") -> Path:
        out_dir = root / "target" / "near"
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / name
        path.write_bytes(b"\x00asm\x01\x00\x00\x00")
        return path

    return _write


@pytest.fixture
def settings() -> BuildSettings:
    """Default build settings with a non-interactive container."""
    s = BuildSettings()
    s.container.interactive = False
    return s


class RecordingBuilder(Builder):
    """Stand-in build path that records calls and returns or raises on demand."""

    def __init__(
        self,
        label: str,
        result: Optional[ArtifactDescriptor] = None,
        error: Optional[BuildError] = None,
    ) -> None:
        self.label = label
        self.result = result
        self.error = error
        self.calls: list[BuildOptions] = []

    @property
    def name(self) -> str:
        return self.label

    def run(self, options: BuildOptions) -> ArtifactDescriptor:
        self.calls.append(options)
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


@pytest.fixture
def recording_builder() -> type[RecordingBuilder]:
    """The :class:`RecordingBuilder` class, for tests that need stand-ins."""
    return RecordingBuilder


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN, colourless output manager so messages are easy to assert."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
