"""Canonical Pydantic models shared across all nearbuild modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
and in the project-local ``nearbuild.json``:
    :class:`ContainerConfig`, :class:`ToolchainConfig`,
    :class:`ArtifactConfig`, :class:`BuildSettings`
    and :class:`GlobalConfig`.

**Build models** -- created per invocation and never persisted:
    :class:`ColorPreference`, :class:`BuildOptions`,
    :class:`ContainerInvocation` and :class:`ArtifactDescriptor`.

Build models are frozen: once the CLI layer has constructed a
:class:`BuildOptions` it is passed unchanged to whichever build path runs.
"""

from __future__ import annotations

import enum
import shlex
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class ContainerConfig(BaseModel):
    """How the reproducible container build is launched."""

    runtime: str = Field(default="docker", description="Container runtime executable")
    image: str = Field(
        default="sourcescan/cargo-near", description="Container image reference"
    )
    tag: str = Field(default="0.6.0", description="Pinned image version tag")
    name: str = Field(default="cargo-near-container", description="Container name")
    mount_point: str = Field(
        default="/host", description="Where the project root is mounted in the container"
    )
    remove: bool = Field(default=True, description="Remove the container after it exits")
    interactive: Optional[bool] = Field(
        default=None,
        description="Attach a TTY (-it). null: only when stdin is a terminal",
    )

    @property
    def image_ref(self) -> str:
        """The ``image:tag`` reference passed to the runtime."""
        return f"{self.image}:{self.tag}"


class ToolchainConfig(BaseModel):
    """The opaque build command run both in the container and on the host."""

    command: list[str] = Field(
        default_factory=lambda: ["cargo", "near", "build"],
        description="Toolchain build command and its fixed leading arguments",
    )


class ArtifactConfig(BaseModel):
    """Where the toolchain leaves its output and what it looks like."""

    extension: str = Field(default="wasm", description="Artifact file extension")
    output_subdir: str = Field(
        default="target/near", description="Output directory relative to the project root"
    )


class BuildSettings(BaseModel):
    """Build-related settings, mergeable from user, project and env layers."""

    container: ContainerConfig = Field(default_factory=ContainerConfig)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    artifacts: ArtifactConfig = Field(default_factory=ArtifactConfig)


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/nearbuild/config.json``.

    Loaded and saved by :func:`~nearbuild.config.load_global_config` and
    :func:`~nearbuild.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~nearbuild.config.resolve_settings`
    for the full precedence chain.
    """

    build: BuildSettings = Field(default_factory=BuildSettings)


# --- Build models ---


class ColorPreference(str, enum.Enum):
    """Terminal colouring requested for the toolchain's own output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class BuildOptions(BaseModel):
    """Validated, immutable set of build flags supplied by the CLI layer.

    Every ``skip_*`` / ``debug_mode`` flag defaults to ``False`` (the
    toolchain's own default behaviour). Both build paths translate the same
    instance into their argument conventions via
    :func:`~nearbuild.build.base.toolchain_flags`.
    """

    model_config = ConfigDict(frozen=True)

    skip_container: bool = False
    debug_mode: bool = False
    skip_interface_generation: bool = False
    skip_interface_embedding: bool = False
    skip_interface_docs: bool = False
    output_dir: Optional[Path] = None
    manifest_path: Optional[Path] = None
    color_mode: ColorPreference = ColorPreference.AUTO


class ContainerInvocation(BaseModel):
    """A single container launch, built per call and never persisted."""

    model_config = ConfigDict(frozen=True)

    runtime: str
    name: str
    volume: str
    image: str
    remove: bool = True
    interactive: bool = False
    shell_command: str

    def argv(self) -> list[str]:
        """Full argument vector for :func:`subprocess.run`."""
        args = [self.runtime, "run", "--name", self.name, "-v", self.volume]
        if self.remove:
            args.append("--rm")
        if self.interactive:
            args.append("-it")
        args.extend([self.image, "bash", "-c", self.shell_command])
        return args

    def command_line(self) -> str:
        """Printable, shell-quoted form of :meth:`argv` for diagnostics."""
        return shlex.join(self.argv())


class ArtifactDescriptor(BaseModel):
    """The single artifact a successful build produced.

    Attributes:
        path: Absolute path to the artifact file.
        resolved_from: Directory the artifact was located in.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    resolved_from: Path
