"""
CryptoLab Console Output
=========================

Rich-based console output formatters for the CryptoLab cipher engine.
Provides colour-coded displays for cipher runs and their intermediate
state (alphabet mappings, key streams, Playfair squares, Hill blocks,
rail fences, transposition grids), frequency and entropy analysis,
key-length estimates and plaintext/ciphertext comparisons.

Uses the shared :class:`~labcore.console.LabConsole` infrastructure for
consistent styling.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from labcore.console import LabConsole
from cryptolab.analyzers.frequency import ENGLISH_FREQUENCY
from cryptolab.core.models import (
    AlphabetMapping,
    AnalysisReport,
    CipherInfo,
    CipherRun,
    ComparisonReport,
    HillVisualization,
    KeyStreamVisualization,
    PlayfairVisualization,
    RailFenceVisualization,
    StagedVisualization,
    TranspositionVisualization,
    VisualizationData,
)


# ===================================================================== #
#  Colour Maps
# ===================================================================== #

_GRADE_COLOURS: dict[str, str] = {
    "A+": "bold bright_green",
    "A": "green",
    "B": "yellow",
    "C": "dark_orange",
    "D": "red",
    "F": "bold white on red",
}

_RANDOMNESS_COLOURS: dict[str, str] = {
    "Very High": "bold bright_green",
    "High": "green",
    "Medium": "yellow",
    "Low": "dark_orange",
    "Very Low": "red",
}

_BAR_WIDTH = 30


class CryptoLabDisplay:
    """Console output formatters for CryptoLab results.

    Usage::

        display = CryptoLabDisplay(LabConsole())
        display.display_run(run)
        display.display_analysis(report)
    """

    def __init__(self, console: Optional[LabConsole] = None) -> None:
        self.console = console or LabConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Cipher runs
    # ------------------------------------------------------------------ #

    def display_run(self, run: CipherRun) -> None:
        self.console.section(f"{run.cipher} :: {run.mode.value}")

        body = Text()
        body.append("Input:  ", style="bold")
        body.append(run.input_text + "\n")
        body.append("Output: ", style="bold")
        body.append(run.output_text, style="lab.cell")
        self._rich.print(Panel(body, title="Result", border_style="cyan"))

        if run.visualization is not None:
            self.display_visualization(run.visualization)

        if run.metric is not None:
            m = run.metric
            self.console.info(
                f"{m.execution_time_ms:.3f} ms | {m.throughput:,.0f} chars/s | "
                f"efficiency {m.efficiency:.1f}"
            )

    def display_visualization(self, view: VisualizationData) -> None:
        """Render the intermediate state recorded by a cipher."""
        if isinstance(view, StagedVisualization):
            for index, stage in enumerate(view.stages, start=1):
                self._rich.print(f"[lab.dim]Stage {index}: {stage.cipher}[/lab.dim]")
                self.display_visualization(stage)
        elif isinstance(view, AlphabetMapping):
            self.console.grid(
                f"Shift {view.shift}",
                [list(view.plain_alphabet), list(view.cipher_alphabet)],
            )
        elif isinstance(view, KeyStreamVisualization):
            self._key_stream_table(view)
        elif isinstance(view, PlayfairVisualization):
            self.console.grid("Playfair Square", view.square)
            self.console.table(
                "Digraphs",
                ["Pair", "Rule", "Output"],
                [(d.pair, d.rule, d.output) for d in view.digraphs],
            )
        elif isinstance(view, HillVisualization):
            self._hill_tables(view)
        elif isinstance(view, RailFenceVisualization):
            cells = [[ch or "." for ch in row] for row in view.fence]
            self.console.grid(f"Rail Fence ({view.rails} rails)", cells)
        elif isinstance(view, TranspositionVisualization):
            header = [
                f"{view.key[col]}{view.column_order.index(col) + 1}"
                for col in range(len(view.key))
            ]
            self.console.grid(f"Grid (key {view.key})", view.grid, header=header)

    def _key_stream_table(self, view: KeyStreamVisualization) -> None:
        tbl = Table(
            title="Key Stream",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_header=False,
        )
        tbl.add_column("Row", style="bold")
        for _ in view.steps:
            tbl.add_column(justify="center")
        tbl.add_row("Text", *(s.input for s in view.steps))
        tbl.add_row("Key", *(s.key for s in view.steps), style="lab.dim")
        tbl.add_row("Out", *(s.output for s in view.steps), style="lab.cell")
        self._rich.print(tbl)

    def _hill_tables(self, view: HillVisualization) -> None:
        self.console.grid(
            f"Key Matrix (det {view.determinant} mod 26)",
            [[str(v) for v in row] for row in view.matrix],
        )
        self.console.grid(
            "Inverse Matrix", [[str(v) for v in row] for row in view.inverse]
        )
        self.console.table(
            "Blocks",
            ["Block", "Vector", "Product", "Output"],
            [(b.block, b.vector, b.product, b.output) for b in view.blocks],
        )

    # ------------------------------------------------------------------ #
    #  Analysis
    # ------------------------------------------------------------------ #

    def display_analysis(self, report: AnalysisReport, title: str = "Analysis") -> None:
        self.console.section(title)
        freq = report.frequency
        entropy = report.entropy

        summary = Text()
        summary.append("Letters: ", style="bold")
        summary.append(f"{report.text_length:,} ({freq.table.unique_chars} distinct)\n")
        summary.append("Index of Coincidence: ", style="bold")
        summary.append(f"{freq.ic.value:.4f} ({freq.ic.interpretation.value})\n")
        summary.append("Chi-Squared vs English: ", style="bold")
        summary.append(
            f"{freq.comparison.chi_squared:.2f} (p={freq.comparison.p_value:.4f})\n"
        )
        summary.append("Entropy: ", style="bold")
        summary.append(f"{entropy.entropy:.4f} / {entropy.max_entropy:.4f} bits ")
        summary.append(
            f"[{entropy.rating.value}]",
            style=_RANDOMNESS_COLOURS.get(entropy.rating.value, "white"),
        )
        summary.append("\nConditional Entropy: ", style="bold")
        summary.append(f"{report.conditional_entropy:.4f} bits")
        self._rich.print(Panel(summary, title="Summary", border_style="cyan"))

        self._frequency_table(report)

        if freq.digraphs or freq.trigraphs:
            self._ngram_table(freq.digraphs[:10], freq.trigraphs[:10])

        if report.key_length is not None and report.key_length.candidates:
            self.console.table(
                f"Kasiski Key Lengths (gcd {report.key_length.gcd})",
                ["Length", "Votes", "Score"],
                [
                    (c.length, c.count, f"{c.score:.2f}")
                    for c in report.key_length.candidates
                ],
            )
        if report.friedman:
            self.console.table(
                "Column IC (Friedman)",
                ["Length", "Average IC", "Confidence"],
                [
                    (c.length, f"{c.average_ic:.4f}", f"{c.confidence:.0f}%")
                    for c in report.friedman
                ],
            )

        if report.findings:
            self.console.findings_table(report.findings)

    def _frequency_table(self, report: AnalysisReport) -> None:
        tbl = Table(
            title="Letter Frequencies",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
        )
        tbl.add_column("Letter", justify="center")
        tbl.add_column("Count", justify="right")
        tbl.add_column("%", justify="right")
        tbl.add_column("English %", justify="right", style="lab.dim")
        tbl.add_column("Bar", width=_BAR_WIDTH + 2)

        peak = max((e.percentage for e in report.frequency.table.letters), default=0.0)
        for entry in report.frequency.table.letters:
            tbl.add_row(
                entry.letter,
                str(entry.count),
                f"{entry.percentage:.2f}",
                f"{ENGLISH_FREQUENCY[entry.letter]:.2f}",
                self._bar(entry.percentage, peak),
            )
        self._rich.print(tbl)

    def _ngram_table(self, digraphs: Sequence[Any], trigraphs: Sequence[Any]) -> None:
        rows = []
        for i in range(max(len(digraphs), len(trigraphs))):
            d = digraphs[i] if i < len(digraphs) else None
            t = trigraphs[i] if i < len(trigraphs) else None
            rows.append(
                (
                    d.sequence if d else "",
                    d.count if d else "",
                    t.sequence if t else "",
                    t.count if t else "",
                )
            )
        self.console.table("Top N-grams", ["Digraph", "Count", "Trigraph", "Count"], rows)

    @staticmethod
    def _bar(value: float, peak: float) -> str:
        if peak <= 0:
            return ""
        filled = max(0, min(_BAR_WIDTH, int(value / peak * _BAR_WIDTH)))
        return f"[bright_cyan]{'█' * filled}[/bright_cyan]"

    # ------------------------------------------------------------------ #
    #  Comparison
    # ------------------------------------------------------------------ #

    def display_comparison(self, report: ComparisonReport) -> None:
        self.console.section("Plaintext vs Ciphertext")
        ent = report.entropy
        rows = [
            ("Entropy (bits)", f"{ent.plaintext.entropy:.4f}", f"{ent.ciphertext.entropy:.4f}"),
            (
                "Normalised",
                f"{ent.plaintext.percentage:.1f}%",
                f"{ent.ciphertext.percentage:.1f}%",
            ),
            (
                "Index of Coincidence",
                f"{report.plaintext.frequency.ic.value:.4f}",
                f"{report.ciphertext.frequency.ic.value:.4f}",
            ),
            (
                "Chi-Squared",
                f"{report.plaintext.frequency.comparison.chi_squared:.2f}",
                f"{report.ciphertext.frequency.comparison.chi_squared:.2f}",
            ),
        ]
        self.console.table("Statistics", ["Measure", "Plaintext", "Ciphertext"], rows)

        sec = report.security
        colour = _GRADE_COLOURS.get(sec.grade.value, "white")
        body = Text()
        body.append("Grade: ", style="bold")
        body.append(f" {sec.grade.value} ", style=colour)
        body.append(f"  ({sec.overall:.1f}/100)\n", style="bold")
        body.append(
            f"Entropy {sec.entropy_score:.1f} | Frequency {sec.frequency_score:.0f} | "
            f"IC {sec.ic_score:.1f}\n"
        )
        body.append("Entropy gain: ", style="bold")
        body.append(
            f"{ent.delta:+.4f} bits ({ent.percent_improvement:+.1f}%, "
            f"{ent.quality.value}), effectiveness {ent.effectiveness:.0f}/100"
        )
        for rec in sec.recommendations:
            body.append(f"\n• {rec}", style="lab.dim")
        self._rich.print(Panel(body, title="Security Score", border_style="cyan"))

        if report.findings:
            self.console.findings_table(report.findings)

    # ------------------------------------------------------------------ #
    #  Catalog & metrics
    # ------------------------------------------------------------------ #

    def display_catalog(self, ciphers: Sequence[CipherInfo]) -> None:
        self.console.table(
            "Cipher Catalog",
            ["Name", "Cipher", "Category", "Key", "Status"],
            [
                (
                    c.name,
                    c.display_name,
                    c.category.value,
                    c.key_kind or "-",
                    "[green]ready[/green]" if c.implemented else "[dim]placeholder[/dim]",
                )
                for c in ciphers
            ],
        )

    def display_metrics(self, summary: dict[str, Any]) -> None:
        if not summary:
            self.console.info("No performance metrics recorded.")
            return
        self.console.table(
            "Performance",
            ["Operations", "Avg time (ms)", "Avg throughput", "Avg efficiency"],
            [
                (
                    summary["total_operations"],
                    f"{summary['average_time_ms']:.3f}",
                    f"{summary['average_throughput']:,.0f}",
                    f"{summary['average_efficiency']:.1f}",
                )
            ],
        )
