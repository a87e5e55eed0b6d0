"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~nearbuild.exceptions.NearBuildError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ nearbuild build --no-docker
    $ echo $?
    4   # EXIT_ARTIFACT_NOT_FOUND -- the build produced no .wasm file
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_BUILD_FAILED = 3
"""The local toolchain could not be started or exited with a non-zero status."""

EXIT_ARTIFACT_NOT_FOUND = 4
"""The build finished but no artifact with the expected extension was found."""

EXIT_DIRECTORY_UNREADABLE = 5
"""The artifact output directory is missing or could not be listed."""

EXIT_PATH_CONVERSION = 6
"""A resolved path could not be represented as UTF-8."""

EXIT_CONTAINER_FAILURE = 7
"""The containerized build failed and no fallback was attempted."""
