"""textverify CLI — Typer application with verify, sections, replace, and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from textverify import __version__

app = typer.Typer(
    name="textverify",
    help="Check page text layers against an editorial memo.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _read_text(path: Path) -> str:
    """Read a UTF-8 text file (BOM tolerated), exit 2 on failure."""
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read {path}: {exc}")
        raise typer.Exit(code=2) from exc


# ── verify ────────────────────────────────────────────────────────────────────


@app.command()
def verify(
    layers: Path = typer.Argument(..., help="Extracted layers (.json / .yaml)"),
    memo: Path = typer.Argument(..., help="Text memo"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .textverify.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    page: Optional[int] = typer.Option(None, "--page", "-p", help="Only report this page number"),
    preserve_chunks: Optional[bool] = typer.Option(
        None, "--preserve-chunks/--no-preserve-chunks", help="Keep blank-line boundaries as separators",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Compare every page's text layers with its memo section."""
    from textverify.config.loader import ConfigError, load_config
    from textverify.config.schema import OUTPUT_FORMATS
    from textverify.output import json_report, terminal
    from textverify.text.layers import LayerLoadError, load_pages
    from textverify.verify.engine import verify as run_verify

    _setup_logging(verbose)

    # --- Load config ---
    try:
        cfg = load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- CLI overrides ---
    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if preserve_chunks is not None:
        cfg.normalize.preserve_chunks = preserve_chunks

    # --- Inputs ---
    try:
        pages = load_pages(layers, include_hidden=cfg.layers.include_hidden)
    except LayerLoadError as exc:
        console.print(f"[bold red]Layer error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    memo_raw = _read_text(memo)

    # --- Run ---
    result = run_verify(pages, memo_raw, cfg)
    if page is not None:
        result.pages = [p for p in result.pages if p.page_num == page]
        if not result.pages:
            console.print(f"[bold red]Error:[/bold red] no page {page} in {layers}")
            raise typer.Exit(code=2)

    # --- Output ---
    report_text: Optional[str] = None
    if cfg.output.format == "terminal":
        terminal.render(
            result,
            show_summary=cfg.output.show_summary,
            show_matches=cfg.output.show_matches,
        )
    else:
        report_text = json_report.render(result)
        print(report_text)

    if output:
        Path(output).write_text(report_text or json_report.render(result), encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    raise typer.Exit(code=1 if result.has_differences else 0)


# ── sections ──────────────────────────────────────────────────────────────────


@app.command()
def sections(
    memo: Path = typer.Argument(..., help="Text memo"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show the delimiter convention and page sections detected in a memo."""
    import json

    from textverify.memo.parser import get_unique_memo_sections, parse_memo
    from textverify.output import terminal

    _setup_logging(verbose)
    parsed = parse_memo(_read_text(memo))

    if format == "json":
        print(json.dumps({
            "delimiter_pattern": parsed.pattern_id,
            "sections": [
                {"pages": list(s.page_nums), "text": s.text}
                for s in get_unique_memo_sections(parsed)
            ],
        }, indent=2, ensure_ascii=False))
    elif format == "terminal":
        terminal.render_sections(parsed, console=Console())
    else:
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)


# ── replace ───────────────────────────────────────────────────────────────────


@app.command()
def replace(
    memo: Path = typer.Argument(..., help="Text memo"),
    page: int = typer.Argument(..., help="Page number whose section is replaced"),
    new_text: Path = typer.Argument(..., help="File holding the new section text ('-' for stdin)"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite MEMO instead of printing"),
) -> None:
    """Replace one page's memo section, leaving delimiters and other pages untouched."""
    from textverify.memo.parser import parse_memo
    from textverify.memo.rewriter import find_section, rewrite_page

    raw = _read_text(memo)
    body = sys.stdin.read() if str(new_text) == "-" else _read_text(new_text)

    if find_section(parse_memo(raw).sections, page) is None:
        console.print(f"[bold red]Error:[/bold red] no memo section for page {page}")
        raise typer.Exit(code=1)

    updated = rewrite_page(raw, page, body)
    if in_place:
        memo.write_text(updated, encoding="utf-8")
        console.print(f"[green]✓[/green] Rewrote page {page} in {memo}")
    else:
        sys.stdout.write(updated)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .textverify.toml in the current directory."""
    from textverify.config.defaults import DEFAULT_TOML
    from textverify.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"textverify {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """textverify — check page text layers against an editorial memo."""
