"""
multifile-loader — CLI entrypoint.

Usage:
    python -m multifile_loader.main --help
    python -m multifile_loader.main build src/components/Button.vue/index.js
    python -m multifile_loader.main loaders src/components/Button.vue/index.js --json
    python -m multifile_loader.main config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from multifile_loader import __version__
from multifile_loader.core.models.component import BuildMode
from multifile_loader.core.observability.logging_config import level_from_flags, setup_from_env


def _mode_options(func):
    """Build-mode flags shared by ``build`` and ``loaders``."""
    func = click.option(
        "--target", type=click.Choice(["web", "node"]), default="web",
        help="Bundler target (node = server-side rendering build).",
    )(func)
    func = click.option("--production", is_flag=True, help="Production build (no hot reload, minified CSS).")(func)
    func = click.option("--source-map", is_flag=True, help="Host emits source maps.")(func)
    func = click.option(
        "--context", "context_dir", type=click.Path(file_okay=False), default=None,
        help="Build context root (default: cwd).",
    )(func)
    return func


def _mode(target: str, production: bool, source_map: bool) -> BuildMode:
    return BuildMode.for_target(target, minimize=production, source_map=source_map)


@click.group()
@click.version_option(version=__version__, prog_name="multifile")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to multifile.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """multifile-loader — assemble directory components into bundler modules."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_from_env(level_from_flags(debug=debug, verbose=verbose, quiet=quiet))


@cli.command()
@click.argument("script", type=click.Path(dir_okay=False))
@_mode_options
@click.option("--request", "request_str", default=None, help="Originating request (server module identity).")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write the module to a file.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def build(
    ctx: click.Context,
    script: str,
    target: str,
    production: bool,
    source_map: bool,
    context_dir: str | None,
    request_str: str | None,
    output: str | None,
    as_json: bool,
) -> None:
    """Assemble the runtime module for one component script."""
    from multifile_loader.core.use_cases.transform import transform_component

    result = transform_component(
        Path(script),
        mode=_mode(target, production, source_map),
        context=Path(context_dir) if context_dir else None,
        request=request_str,
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    assert result.module is not None  # guaranteed after error check above

    for diag in result.diagnostics:
        click.secho(f"❌ {diag['component']}: {diag['message']}", fg="red", err=True)

    if output:
        Path(output).write_text(result.module.content + "\n", encoding="utf-8")
        if not ctx.obj.get("quiet"):
            click.secho(f"✅ {result.module.reason} → {output}", fg="green", err=True)
        return

    click.echo(result.module.content)


@cli.command()
@click.argument("script", type=click.Path(dir_okay=False))
@_mode_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def loaders(
    ctx: click.Context,
    script: str,
    target: str,
    production: bool,
    source_map: bool,
    context_dir: str | None,
    as_json: bool,
) -> None:
    """Show the loaders a component's artifacts are required with."""
    from multifile_loader.core.use_cases.transform import resolve_component_loaders

    result = resolve_component_loaders(
        Path(script),
        mode=_mode(target, production, source_map),
        context=Path(context_dir) if context_dir else None,
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    assert result.loaders is not None
    click.secho(f"\n🔑 {result.module_id}", fg="cyan", bold=True)
    for kind, ref in result.loaders.to_dict().items():
        click.secho(f"   {kind}:", fg="white", bold=True)
        click.echo(f"     {ref['request'] or '(none — required as-is)'}")
    click.echo()


@cli.group()
def config() -> None:
    """Loader options commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate multifile.yml."""
    from multifile_loader.core.use_cases.transform import check_options

    result = check_options(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ Options are valid", fg="green", bold=True)
        click.echo(f"   File: {result.config_path}")
    else:
        click.secho("❌ Option errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
