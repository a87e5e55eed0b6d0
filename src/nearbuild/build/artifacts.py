"""Locating the single build artifact among build byproducts.

The toolchain writes its output into ``<project_root>/target/near`` along
with ABI JSON files and other byproducts. :func:`find_artifact` picks the
one file with the artifact extension; :func:`locate_artifact` wraps the
result in an :class:`~nearbuild.models.ArtifactDescriptor`.

Directory entries are sorted by name before matching so the choice does not
depend on the platform's enumeration order.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from nearbuild.build.base import ensure_utf8
from nearbuild.exceptions import ArtifactNotFound, BuildError, DirectoryUnreadable
from nearbuild.models import ArtifactDescriptor

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "wasm"


def find_artifact(directory: Path, extension: str = DEFAULT_EXTENSION) -> Path:
    """Return the first regular file in *directory* with the given extension.

    Only the immediate entries of *directory* are considered. Entries are
    compared in lexicographic order of their names.

    Args:
        directory: Directory to scan (non-recursively).
        extension: Extension without the leading dot.

    Raises:
        DirectoryUnreadable: If *directory* does not exist or cannot be
            listed.
        ArtifactNotFound: If no matching file exists.
    """
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise DirectoryUnreadable(directory, exc) from exc

    suffix = f".{extension}"
    matches = [entry for entry in entries if entry.suffix == suffix and entry.is_file()]
    if not matches:
        raise ArtifactNotFound(directory, extension)

    if len(matches) > 1:
        logger.debug(
            "Multiple %s artifacts in %s, using %s (ignored: %s)",
            suffix,
            directory,
            matches[0].name,
            ", ".join(m.name for m in matches[1:]),
        )
    return matches[0]


def locate_artifact(directory: Path, extension: str = DEFAULT_EXTENSION) -> ArtifactDescriptor:
    """Find the artifact in *directory* and describe it.

    Raises:
        DirectoryUnreadable: See :func:`find_artifact`.
        ArtifactNotFound: See :func:`find_artifact`.
        PathConversionFailure: If the artifact path is not valid UTF-8.
    """
    path = find_artifact(directory, extension)
    ensure_utf8(path)
    return ArtifactDescriptor(path=path.absolute(), resolved_from=directory)


def copy_to_output_dir(artifact: ArtifactDescriptor, output_dir: Path) -> ArtifactDescriptor:
    """Copy *artifact* into *output_dir* and return a descriptor for the copy.

    The directory is created if necessary. An existing file with the same
    name is overwritten. When *output_dir* already holds the artifact itself
    (for example ``--out-dir target/near``) nothing is copied and *artifact*
    is returned unchanged.

    Raises:
        BuildError: If the directory cannot be created or the copy fails.
    """
    target_dir = output_dir.expanduser()
    target = target_dir / artifact.path.name
    try:
        if target.exists() and target.samefile(artifact.path):
            logger.debug("%s is already in %s, not copying", artifact.path.name, target_dir)
            return artifact
        target_dir.mkdir(parents=True, exist_ok=True)
        target = Path(shutil.copy2(artifact.path, target))
    except OSError as exc:
        raise BuildError(
            f"Failed to copy {artifact.path} to {target_dir}: {exc}"
        ) from exc
    ensure_utf8(target)
    logger.debug("Copied %s to %s", artifact.path, target)
    return ArtifactDescriptor(path=target.absolute(), resolved_from=artifact.resolved_from)
