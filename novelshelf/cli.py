"""Command-line interface for novelshelf.

Responsibilities:
- Expose catalog search, work detail, and chapter reading commands.
- Resolve configuration from an optional YAML file or the environment.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from .catalog.client import CatalogClient
from .catalog.session import SearchSession
from .cli_rendering import (
    echo_chapter,
    echo_search_diagnostic,
    echo_work_detail,
    echo_work_rows,
    exit_with_command_error,
)
from .config import ConfigLoader, NovelshelfConfig
from .errors import CommandStageError
from .models.datatypes import Chapter, Work
from .telemetry.logger import RunLogger
from .text.segmenter import ChapterSegmenter

app = typer.Typer(
    name="novelshelf",
    no_args_is_help=True,
    help="Search the public-domain catalog and read works chapter by chapter.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file (defaults to environment)."),
]
QueryArgument = Annotated[str, typer.Argument(help="Free-text catalog query.")]
PositionArgument = Annotated[
    int,
    typer.Argument(help="1-based position of the work in the search results.", min=1),
]


def _load_config(config_path: Path | None) -> NovelshelfConfig:
    """Load config from YAML when requested, else from the environment."""

    if config_path is None:
        try:
            return ConfigLoader.from_env()
        except ValueError as exc:
            raise CommandStageError(
                stage="config",
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix or unset the `NOVELSHELF_*` variables and rerun.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


async def _select_work(client: CatalogClient, query: str, position: int) -> Work:
    """Search and return the result at 1-based `position`."""

    outcome = await client.search(query)
    if outcome.diagnostic is not None:
        raise CommandStageError(
            stage="search",
            detail=f"Catalog search failed: {outcome.diagnostic}",
            hint="Check network connectivity and the configured `catalog_url`.",
        )
    if position > len(outcome.works):
        raise CommandStageError(
            stage="select",
            detail=(
                f"Result {position} is out of range; the search returned "
                f"{len(outcome.works)} readable work(s)."
            ),
            hint="Run `novelshelf search <query>` to list available results.",
        )
    return outcome.works[position - 1]


async def _read_chapter(
    config: NovelshelfConfig,
    run_logger: RunLogger,
    query: str,
    position: int,
    chapter_index: int,
) -> Chapter:
    """Resolve a work from search results and read one of its chapters."""

    client = CatalogClient(config, run_logger=run_logger)
    work = await _select_work(client, query, position)
    segmenter = ChapterSegmenter(config, run_logger=run_logger)
    return await segmenter.read(work, chapter_index)


@app.command("search")
def search_command(query: QueryArgument, config_file: ConfigOption = None) -> None:
    """Search the catalog and list readable works."""

    run_logger = RunLogger(exclusive=True)
    try:
        config = _load_config(config_file)
        session = SearchSession(CatalogClient(config, run_logger=run_logger))
        works = asyncio.run(session.search(query))
    except Exception as exc:
        exit_with_command_error("search", exc)
    finally:
        run_logger.close()

    echo_search_diagnostic(session.last_diagnostic)
    echo_work_rows(works)


@app.command("show")
def show_command(
    query: QueryArgument,
    position: PositionArgument,
    config_file: ConfigOption = None,
) -> None:
    """Show the detail view of one search result."""

    run_logger = RunLogger(exclusive=True)
    try:
        config = _load_config(config_file)
        client = CatalogClient(config, run_logger=run_logger)
        work = asyncio.run(_select_work(client, query, position))
    except Exception as exc:
        exit_with_command_error("show", exc)
    finally:
        run_logger.close()

    echo_work_detail(work)


@app.command("read")
def read_command(
    query: QueryArgument,
    position: PositionArgument,
    chapter: Annotated[
        int,
        typer.Option("--chapter", help="1-based chapter number to read.", min=1),
    ] = 1,
    config_file: ConfigOption = None,
) -> None:
    """Print one chapter of a search result."""

    run_logger = RunLogger(exclusive=True)
    try:
        config = _load_config(config_file)
        loaded_chapter = asyncio.run(
            _read_chapter(config, run_logger, query, position, chapter - 1)
        )
    except Exception as exc:
        exit_with_command_error("read", exc)
    finally:
        run_logger.close()

    echo_chapter(loaded_chapter)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
