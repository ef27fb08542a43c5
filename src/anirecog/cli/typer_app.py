"""
anirecog Typer CLI Application

This is the Typer-based command-line interface of anirecog. It exposes
title normalization, release identification and library search.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from anirecog.cli.error_handler import handle_cli_error
from anirecog.cli.json_formatter import write_json_output
from anirecog.config import LoggingSettings, load_settings
from anirecog.core.library import AnimeLibrary
from anirecog.core.matching import MatchOptions, RecognitionEngine, ScoredCandidate
from anirecog.core.normalization import NormalizationType, normalize
from anirecog.shared.constants import ANIME_ID_UNKNOWN, Application, CLIDefaults
from anirecog.shared.logging import setup_structured_logger

console = Console()


class NormalizationChoice(str, Enum):
    """Normalization types accepted on the command line."""

    MINIMAL = "minimal"
    FOR_TRIGRAMS = "for-trigrams"
    FOR_LOOKUP = "for-lookup"
    FULL = "full"


class LogLevel(str, Enum):
    """Log levels accepted on the command line."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


app = typer.Typer(
    name=CLIDefaults.APP_NAME,
    help=Application.DESCRIPTION,
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(f"{Application.NAME} {Application.VERSION}")
        raise typer.Exit


@app.callback()
def main(
    ctx: typer.Context,
    log_level: LogLevel | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: from the configuration)",
        case_sensitive=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version information and exit",
    ),
) -> None:
    """Anime title recognition and episode matching."""
    ctx.obj = log_level


def _configure_logging(settings: LoggingSettings, log_level: LogLevel | None) -> None:
    setup_structured_logger(
        level=log_level.value if log_level else settings.level,
        log_file=settings.file,
        use_rich_console=settings.use_rich,
    )


def _load_engine(
    ctx: typer.Context,
    library_path: Path,
    relations_path: Path | None,
    config_path: Path | None,
) -> RecognitionEngine:
    settings = load_settings(config_path)
    _configure_logging(settings.logging, ctx.obj)
    library = AnimeLibrary.from_file(library_path)
    engine = RecognitionEngine.from_settings(library, settings)
    if relations_path is not None:
        engine.read_relations_file(relations_path, service_index=settings.relations.service_index)
    return engine


@app.command("normalize")
def normalize_command(
    text: str = typer.Argument(..., help="Title to normalize"),
    normalization_type: NormalizationChoice = typer.Option(
        NormalizationChoice.FULL,
        "--type",
        "-t",
        help="How much punctuation and whitespace to erase",
        case_sensitive=False,
    ),
) -> None:
    """
    Print the normalized form of a title.

    Examples:
        anirecog normalize "Example Show Season II" --type for-trigrams
    """
    kind = NormalizationType[normalization_type.name]
    typer.echo(normalize(text, kind))


@app.command("identify")
def identify_command(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="File name, path or release title"),
    library: Path = typer.Option(
        ...,
        "--library",
        "-l",
        help="Library snapshot (JSON)",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    relations: Path | None = typer.Option(
        None,
        "--relations",
        "-r",
        help="Relations document",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Configuration file (TOML)"),
    allow_sequels: bool = typer.Option(False, "--allow-sequels", help="Redirect episodes to sequels"),
    check_episode_number: bool = typer.Option(
        True,
        "--check-episode-number/--no-check-episode-number",
        help="Reject episode numbers past the series length",
    ),
    check_anime_type: bool = typer.Option(
        True,
        "--check-anime-type/--no-check-anime-type",
        help="Reject openings, endings and previews",
    ),
    check_airing_date: bool = typer.Option(
        True,
        "--check-airing-date/--no-check-airing-date",
        help="Reject series that have not aired yet",
    ),
    scores: bool = typer.Option(False, "--scores", help="Show candidate scores"),
    json_output: bool = typer.Option(False, "--json", help="Output results in JSON format"),
) -> None:
    """
    Identify the library entry a release belongs to.

    Exits with code 2 when the release is not recognized.

    Examples:
        anirecog identify "[Group] Example Show - 05 [720p].mkv" --library library.json

        anirecog identify "Example Show - 15.mkv" -l library.json -r relations.txt --allow-sequels
    """
    options = MatchOptions(
        allow_sequels=allow_sequels,
        check_airing_date=check_airing_date,
        check_anime_type=check_anime_type,
        check_episode_number=check_episode_number,
    )

    try:
        engine = _load_engine(ctx, library, relations, config)
        episode = engine.parse(title)
        anime_id = engine.identify(episode, give_score=scores, options=options)
        candidates = engine.get_scores() if scores else []
        item = engine.library.find(anime_id)
    except Exception as e:  # pylint: disable=broad-exception-caught
        exit_code = handle_cli_error(e, "identify", json_output=json_output)
        raise typer.Exit(exit_code) from e

    recognized = anime_id != ANIME_ID_UNKNOWN
    result = {
        "recognized": recognized,
        "anime_id": anime_id,
        "title": item.title if item else None,
        "parsed_title": episode.title,
        "episode": str(episode.episode_number_range) if episode.episode_number_range else None,
        "scores": [{"anime_id": c.anime_id, "score": round(c.score, 4)} for c in candidates],
    }

    if json_output:
        write_json_output(True, "identify", data=result)
    else:
        if recognized:
            console.print(f"[green]{anime_id}[/green] {escape(result['title'] or '')}  episode {result['episode'] or '-'}")
        else:
            console.print(f"[yellow]Not recognized:[/yellow] {escape(episode.title or title)}")
        if candidates:
            _print_scores(engine, candidates)

    if not recognized:
        raise typer.Exit(CLIDefaults.EXIT_NOT_RECOGNIZED)


@app.command("search")
def search_command(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Text to search for"),
    library: Path = typer.Option(
        ...,
        "--library",
        "-l",
        help="Library snapshot (JSON)",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Configuration file (TOML)"),
    limit: int = typer.Option(CLIDefaults.DEFAULT_SCORE_LIMIT, "--limit", "-n", min=1, help="Maximum results"),
    json_output: bool = typer.Option(False, "--json", help="Output results in JSON format"),
) -> None:
    """
    Search the library: exact title matches first, then similar titles.

    Examples:
        anirecog search "example" --library library.json
    """
    try:
        engine = _load_engine(ctx, library, None, config)
        ids = engine.search(text)[:limit]
    except Exception as e:  # pylint: disable=broad-exception-caught
        exit_code = handle_cli_error(e, "search", json_output=json_output)
        raise typer.Exit(exit_code) from e

    results = []
    for anime_id in ids:
        item = engine.library.find(anime_id)
        results.append({"anime_id": anime_id, "title": item.title if item else None})

    if json_output:
        write_json_output(True, "search", data={"results": results})
        return

    if not results:
        console.print("[yellow]No results[/yellow]")
        return

    table = Table(title=f"Results for '{escape(text)}'")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title")
    for row in results:
        table.add_row(str(row["anime_id"]), escape(row["title"] or ""))
    console.print(table)


def _print_scores(engine: RecognitionEngine, candidates: list[ScoredCandidate]) -> None:
    table = Table(title="Candidates")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Score", justify="right")
    for candidate in candidates:
        item = engine.library.find(candidate.anime_id)
        table.add_row(str(candidate.anime_id), escape(item.title) if item else "", f"{candidate.score:.3f}")
    console.print(table)


if __name__ == "__main__":
    app()
