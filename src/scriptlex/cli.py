"""ScriptLex Command Line Interface."""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scriptlex.config import (
    configure_logging,
    get_logger,
    get_settings_for_cli,
    set_settings,
)
from scriptlex.exceptions import ScriptLexError
from scriptlex.parser import FountainParser, ParseResult, ParserOptions
from scriptlex.scene_board import build_scene_board

logger = get_logger(__name__)

app = typer.Typer(
    name="scriptlex",
    help="ScriptLex: Fountain screenplay lexer",
    pretty_exceptions_enable=False,
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


class OutputFormat(str, Enum):
    """Output formats for the parse command."""

    JSON = "json"
    HTML = "html"
    TOKENS = "tokens"


FileArgument = Annotated[
    Path,
    typer.Argument(
        help="Fountain file to read",
        exists=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file (YAML, TOML, or JSON)",
    ),
]


def _parse_file(
    ctx: typer.Context,
    file: Path,
    config: Path | None,
    overrides: dict[str, object] | None = None,
) -> ParseResult:
    """Load settings, parse ``file`` and turn library errors into exit codes."""
    logging_overrides: dict[str, object] = ctx.obj or {}
    try:
        settings = get_settings_for_cli(
            config_file=config,
            cli_overrides={**logging_overrides, **(overrides or {})},
        )
        set_settings(settings)
        if config or logging_overrides:
            configure_logging(settings)
        parser = FountainParser(ParserOptions.from_settings(settings))
        return parser.parse_file(file)
    except (ScriptLexError, FileNotFoundError, ValueError) as e:
        logger.error("Command failed", file=str(file), error=str(e))
        console.print(f"[red]Error:[/red] {escape(str(e))}", style="bold")
        raise typer.Exit(1) from e


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure global options."""
    if debug:
        ctx.obj = {"log_level": "DEBUG", "debug": True}
    elif verbose:
        ctx.obj = {"log_level": "INFO"}
    else:
        ctx.obj = {}


def _render_token_table(result: ParseResult) -> Table:
    table = Table(title="Tokens", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Text", no_wrap=False)
    table.add_column("Extra", style="yellow")
    for index, token in enumerate(result.tokens, start=1):
        extra = []
        if token.scene_number:
            extra.append(f"scene={token.scene_number}")
        if token.depth is not None:
            extra.append(f"depth={token.depth}")
        if token.dual:
            extra.append(f"dual={token.dual}")
        table.add_row(
            str(index), token.type.value, escape(token.text), " ".join(extra)
        )
    return table


@app.command(name="parse")
def parse_command(
    ctx: typer.Context,
    file: FileArgument,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.JSON,
    no_title_page: Annotated[
        bool,
        typer.Option("--no-title-page", help="Treat the whole file as script body"),
    ] = False,
    notes: Annotated[
        bool,
        typer.Option("--notes", help="Emit standalone [[notes]] as note tokens"),
    ] = False,
    config: ConfigOption = None,
) -> None:
    """Parse a Fountain file and print its tokens."""
    overrides: dict[str, object] = {}
    if no_title_page:
        overrides["extract_title_page"] = False
    if notes:
        overrides["keep_notes"] = True
    if output_format is OutputFormat.HTML:
        overrides["render_html"] = True

    result = _parse_file(ctx, file, config, overrides)

    if output_format is OutputFormat.HTML:
        typer.echo(result.html.title_page + result.html.script)
    elif output_format is OutputFormat.TOKENS:
        console.print(_render_token_table(result))
    else:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


@app.command(name="scenes")
def scenes_command(
    ctx: typer.Context,
    file: FileArgument,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    config: ConfigOption = None,
) -> None:
    """Show one card per scene: location, time of day and characters."""
    result = _parse_file(ctx, file, config)
    cards = build_scene_board(result)

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "index": card.index,
                        "heading": card.heading,
                        "sceneNumber": card.scene_number,
                        "sceneType": card.scene_type,
                        "location": card.location,
                        "timeOfDay": card.time_of_day,
                        "description": card.description,
                        "characters": card.characters,
                    }
                    for card in cards
                ],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    if not cards:
        console.print("[yellow]No scenes found.[/yellow]", style="bold")
        return

    table = Table(title=escape(result.title or file.name), show_lines=True)
    table.add_column("Scene", justify="right", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Location", style="green")
    table.add_column("Time", style="yellow")
    table.add_column("Characters", no_wrap=False)
    for card in cards:
        table.add_row(
            card.label,
            card.scene_type or "-",
            escape(card.location or "-"),
            card.time_of_day or "-",
            escape(", ".join(card.characters) or "-"),
        )
    console.print(table)
    console.print(
        f"\n[green]Found {len(cards)} scene{'s' if len(cards) != 1 else ''}[/green]"
    )


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
