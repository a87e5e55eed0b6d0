"""Build command -- produce one contract artifact, verifiably when possible.

Implements ``nearbuild build``. The flags map one-to-one onto
:class:`~nearbuild.models.BuildOptions`; ``--image`` and ``--image-tag``
override the container image from configuration for this run only.

The artifact path is the command's only stdout output (a JSON object with
``--json``); everything else, including the fallback warning, goes to
stderr.

Usage::

    nearbuild build
    nearbuild build --no-docker --no-release
    nearbuild build --manifest-path ./contract/Cargo.toml --out-dir ./res
    nearbuild build --image-tag 0.6.0
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from nearbuild.models import ColorPreference
from nearbuild.output import debug, error, format_response, get_output, print_data, success, suggest


def build_command(
    no_docker: bool = typer.Option(
        False, "--no-docker",
        help="Build contract without SourceScan verification.",
    ),
    no_release: bool = typer.Option(
        False, "--no-release",
        help="Build contract in debug mode, without optimizations and bigger in size.",
    ),
    no_abi: bool = typer.Option(
        False, "--no-abi",
        help="Do not generate ABI for the contract.",
    ),
    no_embed_abi: bool = typer.Option(
        False, "--no-embed-abi",
        help="Do not embed the ABI in the contract binary.",
    ),
    no_doc: bool = typer.Option(
        False, "--no-doc",
        help="Do not include rustdocs in the embedded ABI.",
    ),
    out_dir: Optional[Path] = typer.Option(
        None, "--out-dir",
        help="Copy final artifacts to this directory.",
    ),
    manifest_path: Optional[Path] = typer.Option(
        None, "--manifest-path",
        help="Path to the Cargo.toml (or directory) of the contract to build.",
    ),
    color: ColorPreference = typer.Option(
        ColorPreference.AUTO, "--color",
        help="Coloring of toolchain output: auto, always, never.",
    ),
    image: Optional[str] = typer.Option(
        None, "--image",
        help="Container image to build in. [default: from config]",
    ),
    image_tag: Optional[str] = typer.Option(
        None, "--image-tag",
        help="Container image version tag. [default: from config]",
    ),
) -> None:
    """Build the contract, preferring a reproducible container build.

    When the container runtime is missing or the containerized build fails,
    the contract is built on the host instead and a warning is printed:
    the resulting artifact is not SourceScan-verifiable.

    Example::

        nearbuild build
        nearbuild build --no-docker --out-dir ./res
    """
    from nearbuild.build import create_default_orchestrator, resolve_project_root
    from nearbuild.config import resolve_settings
    from nearbuild.exceptions import NearBuildError, ToolchainNotFound
    from nearbuild.models import BuildOptions
    from nearbuild.output import OutputFormat

    options = BuildOptions(
        skip_container=no_docker,
        debug_mode=no_release,
        skip_interface_generation=no_abi,
        skip_interface_embedding=no_embed_abi,
        skip_interface_docs=no_doc,
        output_dir=out_dir,
        manifest_path=manifest_path,
        color_mode=color,
    )

    try:
        project_root = resolve_project_root(options)
        settings = resolve_settings(project_root, cli_image=image, cli_tag=image_tag)
        debug(f"Project root: {project_root}")
        if not options.skip_container:
            debug(f"Container image: {settings.container.image_ref}")
        artifact = create_default_orchestrator(settings).run(options)
    except NearBuildError as exc:
        error(str(exc))
        if isinstance(exc, ToolchainNotFound):
            suggest("Install the toolchain: cargo install cargo-near")
        raise typer.Exit(code=exc.exit_code)

    success(f"Contract successfully built: {artifact.path}")
    if get_output().format == OutputFormat.JSON:
        format_response(
            {"path": str(artifact.path), "resolved_from": str(artifact.resolved_from)}
        )
    else:
        print_data(str(artifact.path))
