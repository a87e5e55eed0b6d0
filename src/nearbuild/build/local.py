"""Direct builds on the host, without container isolation.

Runs the configured toolchain command (``cargo near build`` by default) in
the project root with the same flags the container path would pass, then
locates the artifact and optionally copies it to ``options.output_dir``.
Failures here are never recovered: the local path is the last resort.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from nearbuild.build.artifacts import copy_to_output_dir, locate_artifact
from nearbuild.build.base import (
    MANIFEST_FILENAME,
    Builder,
    ensure_utf8,
    resolve_project_root,
    toolchain_flags,
)
from nearbuild.exceptions import LocalBuildFailed, ToolchainNotFound
from nearbuild.models import ArtifactDescriptor, BuildOptions, BuildSettings

logger = logging.getLogger(__name__)


class LocalBuilder(Builder):
    """Run the toolchain directly on the host.

    Args:
        settings: Resolved build settings.
    """

    def __init__(self, settings: BuildSettings) -> None:
        self._settings = settings

    @property
    def name(self) -> str:
        return "local"

    def command(self, options: BuildOptions, project_root: Path) -> list[str]:
        """Return the toolchain argument vector for *options*.

        ``--manifest-path`` is added when the project root holds a
        ``Cargo.toml``.

        Raises:
            PathConversionFailure: If the manifest path is not valid UTF-8.
        """
        args = [*self._settings.toolchain.command, *toolchain_flags(options)]
        manifest = project_root / MANIFEST_FILENAME
        if manifest.is_file():
            args.extend(["--manifest-path", ensure_utf8(manifest)])
        return args

    def run(self, options: BuildOptions) -> ArtifactDescriptor:
        """Build on the host and return the produced artifact.

        Raises:
            ToolchainNotFound: If the toolchain executable cannot be started.
            LocalBuildFailed: If the toolchain exits with a non-zero status.
            ArtifactNotFound: If the build left no artifact.
            DirectoryUnreadable: If the output directory is missing.
            PathConversionFailure: If a path is not valid UTF-8.
        """
        project_root = resolve_project_root(options)
        args = self.command(options, project_root)
        logger.debug("Running local build in %s: %s", project_root, shlex.join(args))

        try:
            result = subprocess.run(args, cwd=project_root, check=False)
        except OSError as exc:
            raise ToolchainNotFound(f"Failed to run `{args[0]}`: {exc}") from exc

        if result.returncode != 0:
            raise LocalBuildFailed(
                f"Local build `{shlex.join(args)}` failed with exit status: {result.returncode}",
                returncode=result.returncode,
            )

        artifacts = self._settings.artifacts
        descriptor = locate_artifact(project_root / artifacts.output_subdir, artifacts.extension)
        if options.output_dir is not None:
            descriptor = copy_to_output_dir(descriptor, options.output_dir)
        return descriptor
