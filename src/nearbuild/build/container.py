"""Reproducible builds inside the pinned SourceScan container image.

:func:`build_invocation` is a pure translation from
:class:`~nearbuild.models.BuildOptions` to a
:class:`~nearbuild.models.ContainerInvocation`; :class:`ContainerBuilder`
executes that invocation and, on success, locates the artifact the
toolchain left in the host-mounted project directory.

The invocation has the shape::

    docker run --name cargo-near-container -v <root>:/host --rm -it \\
        sourcescan/cargo-near:0.6.0 \\
        bash -c "cd /host && cargo near build --no-abi --color auto"

Image, tag, runtime and container name all come from
:class:`~nearbuild.models.BuildSettings`; no version negotiation or
pull-retry happens here, that is left to the container runtime.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from pathlib import Path

from nearbuild.build.artifacts import copy_to_output_dir, locate_artifact
from nearbuild.build.base import Builder, ensure_utf8, resolve_project_root, toolchain_flags
from nearbuild.exceptions import LaunchFailure, NonZeroExit
from nearbuild.models import (
    ArtifactDescriptor,
    BuildOptions,
    BuildSettings,
    ContainerInvocation,
)

logger = logging.getLogger(__name__)


def build_invocation(
    options: BuildOptions,
    project_root: Path,
    settings: BuildSettings,
    interactive: bool = False,
) -> ContainerInvocation:
    """Construct the container launch that builds *project_root*.

    Args:
        options: Build flags, mirrored into the in-container toolchain
            command.
        project_root: Absolute host path mounted at the configured mount
            point.
        settings: Image, runtime and toolchain settings.
        interactive: Whether to attach a TTY (``-it``).

    Raises:
        PathConversionFailure: If *project_root* is not valid UTF-8.
    """
    container = settings.container
    root = ensure_utf8(project_root)
    command = [*settings.toolchain.command, *toolchain_flags(options)]
    shell_command = f"cd {shlex.quote(container.mount_point)} && {shlex.join(command)}"
    return ContainerInvocation(
        runtime=container.runtime,
        name=container.name,
        volume=f"{root}:{container.mount_point}",
        image=container.image_ref,
        remove=container.remove,
        interactive=interactive,
        shell_command=shell_command,
    )


def _stdin_is_tty() -> bool:
    return hasattr(sys.stdin, "isatty") and sys.stdin.isatty()


class ContainerBuilder(Builder):
    """Build inside the container and read the artifact back from the host.

    Args:
        settings: Resolved build settings.
    """

    def __init__(self, settings: BuildSettings) -> None:
        self._settings = settings

    @property
    def name(self) -> str:
        return "container"

    def invocation_for(self, options: BuildOptions) -> ContainerInvocation:
        """Return the invocation :meth:`run` would execute for *options*."""
        interactive = self._settings.container.interactive
        if interactive is None:
            interactive = _stdin_is_tty()
        return build_invocation(
            options, resolve_project_root(options), self._settings, interactive
        )

    def execute(self, invocation: ContainerInvocation) -> None:
        """Launch *invocation* and block until the container exits.

        The container's output is not captured; it streams to the terminal.

        Raises:
            LaunchFailure: If the runtime binary cannot be started.
            NonZeroExit: If the container exits with a non-zero status.
        """
        command = invocation.command_line()
        logger.debug("Launching container: %s", command)
        try:
            result = subprocess.run(invocation.argv(), check=False)
        except OSError as exc:
            raise LaunchFailure(
                f"Error executing SourceScan command `{command}`: {exc}",
                command=command,
            ) from exc

        if result.returncode != 0:
            raise NonZeroExit(
                f"SourceScan command `{command}` failed with exit status: {result.returncode}",
                command=command,
                returncode=result.returncode,
            )

    def run(self, options: BuildOptions) -> ArtifactDescriptor:
        """Build in the container, then locate the artifact on the host.

        Raises:
            LaunchFailure: See :meth:`execute`.
            NonZeroExit: See :meth:`execute`.
            ArtifactNotFound: If the container succeeded but left no artifact.
            DirectoryUnreadable: If the output directory is missing.
            PathConversionFailure: If a path is not valid UTF-8.
        """
        invocation = self.invocation_for(options)
        self.execute(invocation)

        project_root = resolve_project_root(options)
        artifacts = self._settings.artifacts
        descriptor = locate_artifact(project_root / artifacts.output_subdir, artifacts.extension)
        if options.output_dir is not None:
            descriptor = copy_to_output_dir(descriptor, options.output_dir)
        return descriptor
