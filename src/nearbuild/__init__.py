"""nearbuild -- reproducible NEAR contract builds with a local fallback.

This package orchestrates the build of a NEAR smart contract into a single
WebAssembly artifact. It prefers a reproducible build inside a pinned
SourceScan container image and falls back to a direct build on the host when
the container runtime is unavailable or the containerized build fails.

Typical workflow::

    nearbuild build                   # container build, local fallback
    nearbuild build --no-docker       # local build only
    nearbuild config set container.tag 0.6.0

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and settings resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    build: Build-mode decision, container/local builders, artifact lookup.
"""

__version__ = "0.1.0"
