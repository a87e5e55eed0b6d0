"""Tests for nearbuild.build.artifacts -- finding and copying the artifact."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from nearbuild.build.artifacts import copy_to_output_dir, find_artifact, locate_artifact
from nearbuild.exceptions import (
    ArtifactNotFound,
    BuildError,
    DirectoryUnreadable,
    PathConversionFailure,
)
from nearbuild.exit_codes import EXIT_ARTIFACT_NOT_FOUND, EXIT_DIRECTORY_UNREADABLE


class TestFindArtifact:
    def test_single_match(self, tmp_path: Path) -> None:
        (tmp_path / "contract.wasm").write_bytes(b"\x00asm")
        (tmp_path / "contract_abi.json").write_text("{}")

        assert find_artifact(tmp_path) == tmp_path / "contract.wasm"

    def test_empty_directory_is_artifact_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ArtifactNotFound) as exc_info:
            find_artifact(tmp_path)
        assert exc_info.value.directory == tmp_path
        assert str(tmp_path) in str(exc_info.value)
        assert exc_info.value.exit_code == EXIT_ARTIFACT_NOT_FOUND

    def test_missing_directory_is_directory_unreadable(self, tmp_path: Path) -> None:
        missing = tmp_path / "target" / "near"
        with pytest.raises(DirectoryUnreadable) as exc_info:
            find_artifact(missing)
        assert exc_info.value.directory == missing
        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert exc_info.value.exit_code == EXIT_DIRECTORY_UNREADABLE

    def test_file_instead_of_directory_is_unreadable(self, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "near"
        not_a_dir.write_text("")
        with pytest.raises(DirectoryUnreadable):
            find_artifact(not_a_dir)

    def test_only_byproducts_is_not_found(self, tmp_path: Path) -> None:
        (tmp_path / "contract_abi.json").write_text("{}")
        (tmp_path / "contract.wasm.bak").write_text("")
        with pytest.raises(ArtifactNotFound):
            find_artifact(tmp_path)

    def test_directory_with_matching_extension_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "fake.wasm").mkdir()
        with pytest.raises(ArtifactNotFound):
            find_artifact(tmp_path)

    def test_does_not_recurse(self, tmp_path: Path) -> None:
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "contract.wasm").write_bytes(b"\x00asm")
        with pytest.raises(ArtifactNotFound):
            find_artifact(tmp_path)

    def test_multiple_matches_pick_lexicographically_first(self, tmp_path: Path) -> None:
        for name in ["zeta.wasm", "alpha.wasm", "middle.wasm"]:
            (tmp_path / name).write_bytes(b"\x00asm")

        assert find_artifact(tmp_path) == tmp_path / "alpha.wasm"

    def test_custom_extension(self, tmp_path: Path) -> None:
        (tmp_path / "contract.wasm").write_bytes(b"\x00asm")
        (tmp_path / "contract.bin").write_bytes(b"\x00")

        assert find_artifact(tmp_path, extension="bin") == tmp_path / "contract.bin"


class TestLocateArtifact:
    def test_descriptor_fields(self, tmp_path: Path) -> None:
        (tmp_path / "contract.wasm").write_bytes(b"\x00asm")

        descriptor = locate_artifact(tmp_path)

        assert descriptor.path == (tmp_path / "contract.wasm").absolute()
        assert descriptor.path.is_absolute()
        assert descriptor.resolved_from == tmp_path

    @pytest.mark.skipif(os.name == "nt", reason="POSIX byte paths only")
    def test_non_utf8_artifact_name(self, tmp_path: Path) -> None:
        raw_name = os.fsdecode(b"contract\xff.wasm")
        try:
            (tmp_path / raw_name).write_bytes(b"\x00asm")
        except (OSError, UnicodeEncodeError):
            pytest.skip("filesystem rejects non-UTF-8 names")

        with pytest.raises(PathConversionFailure) as exc_info:
            locate_artifact(tmp_path)
        assert exc_info.value.raw_path.endswith(raw_name)


class TestCopyToOutputDir:
    def test_copies_and_creates_directory(self, tmp_path: Path) -> None:
        source_dir = tmp_path / "target" / "near"
        source_dir.mkdir(parents=True)
        (source_dir / "contract.wasm").write_bytes(b"\x00asm-bytes")
        descriptor = locate_artifact(source_dir)

        out_dir = tmp_path / "res" / "nested"
        copied = copy_to_output_dir(descriptor, out_dir)

        assert copied.path == (out_dir / "contract.wasm").absolute()
        assert copied.path.read_bytes() == b"\x00asm-bytes"
        assert copied.resolved_from == source_dir
        assert descriptor.path.exists()

    def test_overwrites_existing_copy(self, tmp_path: Path) -> None:
        source_dir = tmp_path / "near"
        source_dir.mkdir()
        (source_dir / "contract.wasm").write_bytes(b"new")
        out_dir = tmp_path / "res"
        out_dir.mkdir()
        (out_dir / "contract.wasm").write_bytes(b"old")

        copied = copy_to_output_dir(locate_artifact(source_dir), out_dir)

        assert copied.path.read_bytes() == b"new"

    def test_output_dir_is_a_file(self, tmp_path: Path) -> None:
        source_dir = tmp_path / "near"
        source_dir.mkdir()
        (source_dir / "contract.wasm").write_bytes(b"\x00asm")
        blocker = tmp_path / "res"
        blocker.write_text("")

        with pytest.raises(BuildError, match="Failed to copy"):
            copy_to_output_dir(locate_artifact(source_dir), blocker)

    def test_output_dir_is_the_artifact_directory(self, tmp_path: Path) -> None:
        source_dir = tmp_path / "target" / "near"
        source_dir.mkdir(parents=True)
        (source_dir / "contract.wasm").write_bytes(b"\x00asm")
        descriptor = locate_artifact(source_dir)

        assert copy_to_output_dir(descriptor, source_dir) == descriptor
        assert (source_dir / "contract.wasm").read_bytes() == b"\x00asm"

    def test_relative_output_dir_naming_the_same_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        source_dir = tmp_path / "target" / "near"
        source_dir.mkdir(parents=True)
        (source_dir / "contract.wasm").write_bytes(b"\x00asm")
        descriptor = locate_artifact(source_dir)
        monkeypatch.chdir(tmp_path)

        copied = copy_to_output_dir(descriptor, Path("target") / ".." / "target" / "near")

        assert copied == descriptor
        assert sorted(p.name for p in source_dir.iterdir()) == ["contract.wasm"]
