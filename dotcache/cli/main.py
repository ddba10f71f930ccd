"""Main CLI entry point and application setup."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
import msgspec
from click.exceptions import Exit
from rich.console import Console

from dotcache import __version__
from dotcache.config import Config, StorageSettings, load_settings
from dotcache.core.paths import MISSING
from dotcache.core.provider import DEFAULT_NAME, CacheProvider
from dotcache.exceptions import CacheError
from dotcache.storage import codec
from dotcache.storage.chain import build_chain

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """CLI context that holds shared resources."""

    settings: StorageSettings
    console: Console
    debug: bool = False

    def open(self, name: str) -> CacheProvider:
        return CacheProvider(name, chain=build_chain(self.settings))


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.WARNING
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


def parse_value(raw: str) -> Any:
    """Parse a command-line value as JSON, falling back to the raw string."""
    try:
        return msgspec.json.decode(raw)
    except msgspec.DecodeError:
        return raw


def print_value(console: Console, value: Any) -> None:
    if isinstance(value, (dict, list)):
        console.print_json(codec.encode(value))
    elif isinstance(value, str):
        console.print(value, markup=False, highlight=False)
    else:
        console.print(codec.encode(value), highlight=False)


class DotCacheGroup(click.Group):
    """Custom group that reports cache errors without tracebacks."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except CacheError as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {e}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


name_option = click.option(
    "--name",
    "-n",
    default=DEFAULT_NAME,
    show_default=True,
    help="Cache namespace",
)


@click.group(cls=DotCacheGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--data-dir",
    "-d",
    type=click.Path(path_type=Path),
    help="Override data directory location",
)
@click.option("--domain", help="Domain used by the legacy and user-data stores")
@click.version_option(
    version=__version__, prog_name="dotcache", message="dotcache version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
    data_dir: Path | None,
    domain: str | None,
) -> None:
    """Inspect and edit dotcache namespaces."""
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)

    overrides: dict[str, Any] = {}
    if config:
        overrides = Config.from_file(config)
    if data_dir:
        overrides["data_dir"] = str(data_dir)
    if domain:
        overrides["domain"] = domain

    settings = load_settings(overrides)
    logger.debug(f"Using storage settings {settings!r}")

    ctx.obj = Context(
        settings=settings,
        console=create_console(no_color=no_color),
        debug=debug,
    )


@cli.command()
@click.argument("key", required=False, default="")
@name_option
@click.pass_obj
def get(obj: Context, key: str, name: str) -> None:
    """Print the value at KEY, or the whole namespace."""
    value = obj.open(name).get(key, MISSING)
    if value is MISSING:
        obj.console.print(f"[yellow]Not found:[/yellow] {key}")
        raise Exit(1)
    print_value(obj.console, value)


@cli.command("set")
@click.argument("key")
@click.argument("value")
@name_option
@click.pass_obj
def set_value(obj: Context, key: str, value: str, name: str) -> None:
    """Set KEY to VALUE (parsed as JSON when possible)."""
    provider = obj.open(name).set(key, parse_value(value))
    if not provider.last_sync_ok:
        obj.console.print("[yellow]Warning:[/yellow] not persisted")


@cli.command("rm")
@click.argument("key")
@name_option
@click.pass_obj
def remove(obj: Context, key: str, name: str) -> None:
    """Remove KEY."""
    provider = obj.open(name)
    provider.remove(key)
    if provider.check(key):
        obj.console.print(f"[yellow]Kept:[/yellow] {key} holds a falsy value")


@cli.command()
@name_option
@click.confirmation_option(prompt="Clear the whole namespace?")
@click.pass_obj
def clear(obj: Context, name: str) -> None:
    """Remove every key in the namespace."""
    obj.open(name).clear()
    obj.console.print(f"[green]Cleared[/green] {name}")


@cli.command()
@click.argument("key")
@name_option
@click.pass_obj
def check(obj: Context, key: str, name: str) -> None:
    """Exit 0 if KEY is set, 1 otherwise."""
    found = obj.open(name).check(key)
    obj.console.print("yes" if found else "no")
    if not found:
        raise Exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
