"""Build paths and the orchestrator that chooses between them.

Key classes:

* :class:`BuildOrchestrator` -- Decides between container and local builds
  and falls back to the local build when the container path fails.
* :class:`ContainerBuilder` -- Runs the toolchain inside the pinned
  SourceScan image.
* :class:`LocalBuilder` -- Runs the toolchain directly on the host.

Example:
    Typical usage from the ``build`` command::

        from nearbuild.build import create_default_orchestrator

        orchestrator = create_default_orchestrator(settings)
        artifact = orchestrator.run(options)
"""

from nearbuild.build.artifacts import copy_to_output_dir, find_artifact, locate_artifact
from nearbuild.build.base import Builder, resolve_project_root, toolchain_flags
from nearbuild.build.container import ContainerBuilder, build_invocation
from nearbuild.build.local import LocalBuilder
from nearbuild.build.orchestrator import (
    FALLBACK_WARNING,
    BuildOrchestrator,
    BuildState,
    create_default_orchestrator,
)

__all__ = [
    "Builder",
    "BuildOrchestrator",
    "BuildState",
    "ContainerBuilder",
    "FALLBACK_WARNING",
    "LocalBuilder",
    "build_invocation",
    "copy_to_output_dir",
    "create_default_orchestrator",
    "find_artifact",
    "locate_artifact",
    "resolve_project_root",
    "toolchain_flags",
]
