"""Rich terminal reporter — unified diff per page, status pills, summary."""

from __future__ import annotations

from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from textverify.diff.models import DiffPart, EntryType, UnifiedDiffEntry
from textverify.memo.parser import ParsedMemo, get_unique_memo_sections
from textverify.verify.models import PageResult, VerifyResult

_STATUS_STYLE = {
    "match": "bold black on green",
    "diff": "bold white on red",
    "no-memo": "bold black on bright_black",
}

_STATUS_LABEL = {
    "match": "MATCH",
    "diff": "DIFF",
    "no-memo": "NO MEMO",
}

_REMOVED_STYLE = "bold red strike"
_ADDED_STYLE = "bold green underline"


def _status_pill(status: str) -> Text:
    return Text(f" {_STATUS_LABEL.get(status, status.upper())} ", style=_STATUS_STYLE.get(status, ""))


def _parts_text(parts: Optional[Sequence[DiffPart]]) -> Text:
    text = Text()
    if parts is None:
        return text
    for p in parts:
        if p.removed:
            text.append(p.value or "·", style=_REMOVED_STYLE)
        elif p.added:
            text.append(p.value or "·", style=_ADDED_STYLE)
        else:
            text.append(p.value)
    return text


def _render_entry(console: Console, entry: UnifiedDiffEntry, show_matches: bool) -> None:
    if entry.type is EntryType.MATCH:
        if show_matches:
            for line in (entry.text or "").split("\n"):
                console.print(Text("  ") + Text(line, style="dim"))
    elif entry.type is EntryType.SEPARATOR:
        console.rule(style="dim")
    elif entry.type is EntryType.LINEBREAK:
        console.print(Text("  ↵ line breaks differ", style="yellow"))
        for line in (entry.psd_text or "").split("\n"):
            console.print(Text("  P ", style="red") + Text(line))
        for line in (entry.memo_text or "").split("\n"):
            console.print(Text("  M ", style="green") + Text(line))
    else:
        if entry.psd_parts is not None:
            console.print(Text("- ", style="red") + _parts_text(entry.psd_parts))
        if entry.memo_parts is not None:
            console.print(Text("+ ", style="green") + _parts_text(entry.memo_parts))


def render_page(console: Console, page: PageResult, *, show_matches: bool = True) -> None:
    header = Text()
    header.append_text(_status_pill(page.status))
    header.append(f"  p.{page.page_num}  ", style="bold")
    header.append(page.file_name, style="magenta")
    if page.memo_shared:
        group = ",".join(str(n) for n in page.memo_shared_group)
        header.append(f"  (shared memo: {group})", style="cyan")
    console.print()
    console.print(header)

    if page.status == "no-memo":
        console.print("[dim]  No memo section for this page.[/dim]")
        return

    for entry in page.entries:
        _render_entry(console, entry, show_matches)


def render(
    result: VerifyResult,
    *,
    show_summary: bool = True,
    show_matches: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print verification results to the terminal using Rich."""
    console = console or Console()

    for page in result.pages:
        render_page(console, page, show_matches=show_matches)

    if show_summary:
        _print_summary(console, result)

    console.print()
    if not result.pages:
        console.print("[bold yellow]No pages to verify.[/bold yellow]")
    elif result.has_differences:
        console.print(
            f"[bold red]✗ {len(result.diff_pages)} page(s) differ from the memo.[/bold red]"
        )
    else:
        console.print("[bold green]✓ All pages with a memo section match.[/bold green]")


def _print_summary(console: Console, result: VerifyResult) -> None:
    console.print()
    console.print(f"[dim]Delimiter:[/dim]     {result.pattern_id or 'blank lines'}")
    console.print(f"[dim]Sections:[/dim]      {result.memo_sections}")
    console.print(f"[dim]Pages:[/dim]         {len(result.pages)}")
    console.print(f"[dim]Matching:[/dim]      {len(result.matched_pages)}")
    console.print(f"[dim]Differing:[/dim]     {len(result.diff_pages)}")
    console.print(f"[dim]No memo:[/dim]       {len(result.no_memo_pages)}")
    console.print(f"[dim]Duration:[/dim]      {result.duration_ms:.0f}ms")


def render_sections(parsed: ParsedMemo, console: Optional[Console] = None) -> None:
    """Print the sections detected in a memo."""
    console = console or Console()
    table = Table(
        title=f"Memo sections ({parsed.pattern_id or 'blank-line fallback'})",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Pages", justify="right", style="green")
    table.add_column("Lines", justify="right")
    table.add_column("Text", min_width=20)

    for section in get_unique_memo_sections(parsed):
        lines: List[str] = section.text.split("\n") if section.text else []
        preview = "\n".join(lines[:3]) + ("\n…" if len(lines) > 3 else "")
        table.add_row(",".join(str(n) for n in section.page_nums), str(len(lines)), preview)

    console.print(table)
