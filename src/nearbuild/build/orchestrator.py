"""Build-mode decision and container-to-local fallback.

:class:`BuildOrchestrator` decides which :class:`~nearbuild.build.base.Builder`
runs for a given :class:`~nearbuild.models.BuildOptions` and owns the one
recovery path in the system: when the container build cannot be launched or
exits non-zero, it warns that the artifact will not be verifiable and builds
locally with the same options.

The orchestrator is a small state machine::

    IDLE --skip_container--> LOCAL_ONLY
    IDLE ------------------> ATTEMPTING_CONTAINER --ContainerError--> FALLEN_BACK_TO_LOCAL

The fallback warning is emitted only on the
``ATTEMPTING_CONTAINER -> FALLEN_BACK_TO_LOCAL`` transition, so exactly one
warning is printed per fallback. Every other error propagates unchanged.
"""

from __future__ import annotations

import enum
import logging

from nearbuild.build.base import Builder
from nearbuild.build.container import ContainerBuilder
from nearbuild.build.local import LocalBuilder
from nearbuild.exceptions import ContainerError
from nearbuild.models import ArtifactDescriptor, BuildOptions, BuildSettings
from nearbuild.output import info, warning

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Compilation without SourceScan verification"


class BuildState(str, enum.Enum):
    """Where the orchestrator is in its current :meth:`BuildOrchestrator.run`."""

    IDLE = "idle"
    LOCAL_ONLY = "local_only"
    ATTEMPTING_CONTAINER = "attempting_container"
    FALLEN_BACK_TO_LOCAL = "fallen_back_to_local"


class BuildOrchestrator:
    """Choose between the container and local build paths.

    Args:
        container: The preferred, verifiable build path.
        local: The host build path, used on request or as the fallback.

    Example::

        orchestrator = BuildOrchestrator(ContainerBuilder(settings), LocalBuilder(settings))
        artifact = orchestrator.run(BuildOptions())
    """

    def __init__(self, container: Builder, local: Builder) -> None:
        self._container = container
        self._local = local
        self._state = BuildState.IDLE

    @property
    def state(self) -> BuildState:
        """State reached by the most recent :meth:`run`."""
        return self._state

    def run(self, options: BuildOptions) -> ArtifactDescriptor:
        """Build one artifact for *options*.

        Raises:
            BuildError: Any failure of the path that ran last, except the
                container failures that trigger the fallback.
        """
        self._state = BuildState.IDLE

        if options.skip_container:
            self._transition(BuildState.LOCAL_ONLY)
            return self._local.run(options)

        self._transition(BuildState.ATTEMPTING_CONTAINER)
        try:
            return self._container.run(options)
        except ContainerError as exc:
            self._fall_back(exc)

        return self._local.run(options)

    def _fall_back(self, exc: ContainerError) -> None:
        info(str(exc), stdout=True)
        warning(FALLBACK_WARNING, stdout=True)
        self._transition(BuildState.FALLEN_BACK_TO_LOCAL)

    def _transition(self, new_state: BuildState) -> None:
        logger.debug("Build state: %s -> %s", self._state.value, new_state.value)
        self._state = new_state


def create_default_orchestrator(settings: BuildSettings) -> BuildOrchestrator:
    """Return an orchestrator wired with the standard container and local builders."""
    return BuildOrchestrator(ContainerBuilder(settings), LocalBuilder(settings))
