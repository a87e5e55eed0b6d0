"""Abstract base class for build paths and helpers shared by them.

Both ways of producing an artifact -- inside the SourceScan container and
directly on the host -- expose the same capability: ``run(options)``
returning an :class:`~nearbuild.models.ArtifactDescriptor`. The
:class:`~nearbuild.build.orchestrator.BuildOrchestrator` only ever talks to
that capability, so the container and local paths are interchangeable in
tests.

The module also holds the pieces of translation both paths must agree on:
:func:`toolchain_flags` (options to toolchain tokens),
:func:`resolve_project_root` and :func:`ensure_utf8`.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path

from nearbuild.exceptions import PathConversionFailure
from nearbuild.models import ArtifactDescriptor, BuildOptions

MANIFEST_FILENAME = "Cargo.toml"


class Builder(ABC):
    """A way of turning :class:`BuildOptions` into one built artifact.

    Implementations are stateless between calls; the same instance may be
    run any number of times.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in log messages (e.g. ``"container"``)."""
        ...

    @abstractmethod
    def run(self, options: BuildOptions) -> ArtifactDescriptor:
        """Build the project described by *options*.

        Returns:
            The descriptor of the single artifact produced.

        Raises:
            BuildError: A subclass describing why no artifact was produced.
        """
        ...


def toolchain_flags(options: BuildOptions) -> list[str]:
    """Translate *options* into toolchain command-line tokens.

    Only the off/skip state of each toggle is passed explicitly; absence
    of a token means the toolchain default. The colour preference is
    always passed so both paths render output the same way.
    """
    flags: list[str] = []
    if options.debug_mode:
        flags.append("--no-release")
    if options.skip_interface_generation:
        flags.append("--no-abi")
    if options.skip_interface_embedding:
        flags.append("--no-embed-abi")
    if options.skip_interface_docs:
        flags.append("--no-doc")
    flags.extend(["--color", options.color_mode.value])
    return flags


def resolve_project_root(options: BuildOptions) -> Path:
    """Return the absolute project root for *options*.

    ``manifest_path`` overrides the current working directory. When it
    names a ``Cargo.toml`` file, the file's directory is the root.
    """
    if options.manifest_path is None:
        root = Path.cwd()
    else:
        root = options.manifest_path.expanduser()
        if root.name == MANIFEST_FILENAME or root.is_file():
            root = root.parent
    return root.resolve()


def ensure_utf8(path: Path) -> str:
    """Return *path* as a string, guaranteeing it is valid UTF-8.

    Raises:
        PathConversionFailure: If the path holds bytes that do not decode
            as UTF-8 (surfaced by Python as lone surrogates).
    """
    raw = os.fsdecode(path)
    try:
        raw.encode("utf-8")
    except UnicodeEncodeError:
        raise PathConversionFailure(raw) from None
    return raw
