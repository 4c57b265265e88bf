"""
CryptoLab Console Interface
============================

Rich presentation layer shared by the CLI and the cipher displays:
the startup banner, section rules, one-line status messages, data
tables, letter grids (Playfair squares, transposition grids) and the
severity-coloured findings table.

Everything here writes to stdout. Log records go to stderr through
:mod:`labcore.logger`, so a quiet console leaves stdout empty.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Iterable, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from labcore.models import Finding, Severity

_LAB_THEME = Theme(
    {
        "lab.section": "bold bright_magenta",
        "lab.success": "bold green",
        "lab.warning": "bold yellow",
        "lab.info": "bold bright_blue",
        "lab.dim": "dim white",
        "lab.cell": "bold bright_white",
        "lab.tagline": "bold bright_green",
        "lab.severity.high": "bold red",
        "lab.severity.medium": "bold yellow",
        "lab.severity.low": "bold bright_cyan",
        "lab.severity.info": "bold bright_blue",
    }
)

_BANNER_ART = r"""
[bright_cyan]
   ___                  _          _           _
  / __|_ _ _  _ _ __ | |_ ___  | |   __ _  | |__
 | (__| '_| || | '_ \|  _/ _ \ | |__/ _` | | '_ \
  \___|_|  \_, | .__/ \__\___/ |____\__,_| |_.__/
           |__/|_|
[/bright_cyan]"""

_TAGLINE = "Classical Cipher Engine & Cryptanalysis Lab"

# (theme style, marker, label) per message kind
_MESSAGE_KINDS: dict[str, tuple[str, str, str]] = {
    "success": ("lab.success", "✔", "OK"),
    "warning": ("lab.warning", "⚠", "WARNING"),
    "info": ("lab.info", "ℹ", "INFO"),
}


def _severity_style(severity: Severity) -> str:
    return f"lab.severity.{severity.value.lower()}"


class LabConsole:
    """Styled stdout console for CryptoLab.

    Usage::

        con = LabConsole()
        con.banner(version="1.0.0")
        con.section("Frequency Analysis")
        con.table("Top letters", ["Letter", "Count"], [("E", 42), ("T", 30)])
        con.success("Report written")

    Args:
        quiet:  Swallow all output (library use, ``--quiet``).
        record: Keep a copy of everything printed, for tests and exports.
    """

    def __init__(self, *, quiet: bool = False, record: bool = False) -> None:
        self._console = Console(theme=_LAB_THEME, quiet=quiet, record=record, highlight=False)

    @property
    def rich(self) -> Console:
        """The wrapped :class:`rich.console.Console`."""
        return self._console

    @property
    def quiet(self) -> bool:
        return self._console.quiet

    # ------------------------------------------------------------------ #
    #  Banner / sections / messages
    # ------------------------------------------------------------------ #

    def banner(self, version: str) -> None:
        """Print the ASCII-art banner with the tagline and a timestamp."""
        stamp = _dt.datetime.now().strftime("%Y-%m-%d %H:%M")
        body = Text.from_markup(
            f"{_BANNER_ART}\n[lab.tagline]{_TAGLINE}[/lab.tagline]\n"
            f"[lab.dim]v{version}  |  {stamp}[/lab.dim]"
        )
        self._console.print(
            Panel(Align.center(body), border_style="bright_cyan", padding=(1, 2))
        )

    def section(self, title: str) -> None:
        self._console.rule(f"  {title}  ", style="lab.section")

    def _message(self, kind: str, message: str) -> None:
        style, marker, label = _MESSAGE_KINDS[kind]
        self._console.print(f"[{style}]{marker} {label}:[/{style}] {message}")

    def success(self, message: str) -> None:
        self._message("success", message)

    def warning(self, message: str) -> None:
        self._message("warning", message)

    def info(self, message: str) -> None:
        self._message("info", message)

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    @staticmethod
    def _new_table(title: str | None, **kwargs: Any) -> Table:
        kwargs.setdefault("show_lines", True)
        return Table(
            title=title,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            **kwargs,
        )

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Iterable[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] = (),
        justify: Sequence[str] = (),
    ) -> None:
        """Print *rows* under *columns*; cells are stringified.

        *styles* and *justify* are per-column and may be shorter than
        *columns*.
        """
        tbl = self._new_table(title, caption=caption)
        for idx, name in enumerate(columns):
            tbl.add_column(
                name,
                style=styles[idx] if idx < len(styles) else "",
                justify=justify[idx] if idx < len(justify) else "left",  # type: ignore[arg-type]
            )
        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))
        self._console.print(tbl)

    def grid(
        self,
        title: str,
        cells: Sequence[Sequence[str]],
        *,
        header: Sequence[str] | None = None,
    ) -> None:
        """Print a centred letter grid, with optional column headers."""
        tbl = self._new_table(title, show_header=header is not None)
        width = max((len(row) for row in cells), default=0)
        for idx in range(width):
            label = header[idx] if header is not None and idx < len(header) else ""
            tbl.add_column(label, justify="center", style="lab.cell")
        for row in cells:
            tbl.add_row(*row)
        self._console.print(tbl)

    def findings_table(self, findings: Sequence[Finding], title: str = "Findings") -> None:
        """Print findings with their severity coloured; nothing if empty."""
        if not findings:
            return
        tbl = self._new_table(title)
        tbl.add_column("#", style="dim", justify="right", width=3)
        tbl.add_column("Severity", width=8)
        tbl.add_column("Finding")
        tbl.add_column("Details", ratio=2)
        for idx, finding in enumerate(findings, start=1):
            style = _severity_style(finding.severity)
            details = finding.description
            if finding.recommendation:
                details += f"\n[lab.dim]→ {finding.recommendation}[/lab.dim]"
            tbl.add_row(
                str(idx),
                f"[{style}]{finding.severity.value}[/{style}]",
                finding.title,
                details,
            )
        self._console.print(tbl)
