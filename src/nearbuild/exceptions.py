"""Exception hierarchy for nearbuild.

All exceptions inherit from :class:`NearBuildError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`nearbuild.exit_codes`.
The top-level error handler in :func:`nearbuild.app.main` catches
``NearBuildError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    NearBuildError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- ConfigError                  (exit 1)
    +-- BuildError                   (exit 1)
        +-- ContainerError           (exit 7)
        |   +-- LaunchFailure
        |   +-- NonZeroExit
        +-- LocalBuildError          (exit 3)
        |   +-- ToolchainNotFound
        |   +-- LocalBuildFailed
        +-- ArtifactNotFound         (exit 4)
        +-- DirectoryUnreadable      (exit 5)
        +-- PathConversionFailure    (exit 6)

:class:`LaunchFailure` and :class:`NonZeroExit` are recovered by the
orchestrator's fallback to a local build and are normally never seen by the
entry point.
"""

from __future__ import annotations

from pathlib import Path

from nearbuild.exit_codes import (
    EXIT_ARTIFACT_NOT_FOUND,
    EXIT_BUILD_FAILED,
    EXIT_CONTAINER_FAILURE,
    EXIT_DIRECTORY_UNREADABLE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PATH_CONVERSION,
)


class NearBuildError(Exception):
    """Base exception for all nearbuild errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`nearbuild.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(NearBuildError):
    """Raised for invalid command arguments, such as an unknown ``config set`` key."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(NearBuildError):
    """Raised for configuration problems (invalid JSON, unknown keys)."""

    exit_code = EXIT_GENERIC_FAILURE


class BuildError(NearBuildError):
    """Base class for every failure produced while building an artifact."""


# --- Container path (recoverable) ---


class ContainerError(BuildError):
    """Raised when the containerized build does not produce a result.

    Args:
        message: Human-readable error description.
        command: The printable container command line that was attempted.
    """

    exit_code = EXIT_CONTAINER_FAILURE

    def __init__(self, message: str, command: str = ""):
        super().__init__(message)
        self.command = command


class LaunchFailure(ContainerError):
    """The container runtime binary could not be started."""


class NonZeroExit(ContainerError):
    """The container ran but exited with a non-zero status."""

    def __init__(self, message: str, command: str = "", returncode: int = 1):
        super().__init__(message, command)
        self.returncode = returncode


# --- Local path ---


class LocalBuildError(BuildError):
    """Base class for host toolchain failures. Never recovered."""

    exit_code = EXIT_BUILD_FAILED


class ToolchainNotFound(LocalBuildError):
    """The local toolchain executable could not be started."""


class LocalBuildFailed(LocalBuildError):
    """The local toolchain exited with a non-zero status."""

    def __init__(self, message: str, returncode: int = 1):
        super().__init__(message)
        self.returncode = returncode


# --- Artifact resolution (fatal) ---


class ArtifactNotFound(BuildError):
    """No file with the expected extension exists in the scanned directory."""

    exit_code = EXIT_ARTIFACT_NOT_FOUND

    def __init__(self, directory: Path, extension: str):
        super().__init__(
            f"No .{extension} artifact found in directory: `{directory}`."
        )
        self.directory = directory
        self.extension = extension


class DirectoryUnreadable(BuildError):
    """The artifact directory does not exist or cannot be listed.

    The underlying :class:`OSError` is kept on ``__cause__`` and on
    :attr:`cause`.
    """

    exit_code = EXIT_DIRECTORY_UNREADABLE

    def __init__(self, directory: Path, cause: OSError):
        super().__init__(
            f"No artifacts directory found: `{directory}` ({cause.strerror or cause})."
        )
        self.directory = directory
        self.cause = cause


class PathConversionFailure(BuildError):
    """A resolved path cannot be represented as a UTF-8 string."""

    exit_code = EXIT_PATH_CONVERSION

    def __init__(self, raw_path: str):
        super().__init__(
            f"Failed to convert path {raw_path.encode('utf-8', 'backslashreplace').decode('utf-8')}"
        )
        self.raw_path = raw_path
