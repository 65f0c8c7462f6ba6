"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
search result rows, work detail views, and chapter text.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import CatalogError, CommandStageError
from .models.datatypes import Chapter, Work


CHAPTER_LINK_COUNT = 20


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, CommandStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_search_diagnostic(diagnostic: CatalogError | None) -> None:
    """Print why a search produced no results, when it degraded."""

    if diagnostic is None:
        return
    typer.secho(
        f"Search unavailable ({diagnostic.failure_kind}): {diagnostic}",
        fg=typer.colors.YELLOW,
        err=True,
    )


def echo_work_rows(works: tuple[Work, ...]) -> None:
    """Print one numbered row per work, or a placeholder when empty."""

    if not works:
        typer.echo("No results.")
        return
    for position, work in enumerate(works, start=1):
        tags = f" [{', '.join(work.tags)}]" if work.tags else ""
        typer.echo(f"{position}. {work.title} by {work.author} ({work.id}){tags}")


def echo_work_detail(work: Work) -> None:
    """Print the detail view of one work with its chapter links."""

    typer.echo(work.title)
    typer.echo(f"Author: {work.author}")
    typer.echo(f"Source: {work.source}")
    if work.tags:
        typer.echo(f"Tags: {', '.join(work.tags)}")
    if work.cover_image_url:
        typer.echo(f"Cover: {work.cover_image_url}")
    typer.echo("")
    typer.echo("Summary")
    typer.echo(work.summary)
    typer.echo("")
    typer.echo("Read")
    for chapter_number in range(1, CHAPTER_LINK_COUNT + 1):
        typer.echo(f"  Chapter {chapter_number}")


def echo_chapter(chapter: Chapter) -> None:
    """Print a chapter title followed by its content."""

    typer.secho(chapter.title, bold=True)
    typer.echo("")
    typer.echo(chapter.content)
