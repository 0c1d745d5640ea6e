import asyncio
import logging
from pathlib import Path

import typer
from rich.logging import RichHandler

from .config import Config, read_document
from .errors import CheckoutError, ConfigError, InputError
from .models import PreparerOptions, TemplateDescriptor
from .preparers import default_preparers

app = typer.Typer(
    help="Check out scaffolder templates from Bitbucket into a local directory.",
    no_args_is_help=True,
)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


@app.command()
def prepare(
    template_file: Path = typer.Argument(
        ..., help="Template entity file (YAML or TOML)"
    ),
    working_directory: Path | None = typer.Option(
        None,
        "--working-directory",
        "-w",
        help="Directory under which the checkout is staged (defaults to the system temp dir).",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file holding scaffolder.bitbucket.api.username/token.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress."),
) -> None:
    """
    Check out the repository a template lives in and print the template directory.
    """
    setup_logging("DEBUG" if verbose else "WARNING")
    if not template_file.is_file():
        typer.echo(f"Template file not found: {template_file}")
        raise typer.Exit(code=1)

    try:
        template = TemplateDescriptor.from_entity(read_document(template_file))
        preparers = default_preparers(Config.load(config_file))
        preparer = preparers.get(template)
        result = asyncio.run(
            preparer.prepare(template, PreparerOptions(working_directory=working_directory))
        )
    except (InputError, ConfigError, CheckoutError, OSError) as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(code=1) from e

    typer.echo(str(result))


@app.command()
def protocols() -> None:
    """List the location protocols that can be prepared."""
    for protocol in default_preparers(Config.empty()).protocols():
        typer.echo(protocol)


if __name__ == "__main__":
    app()
