"""
CryptoLab CLI
==============

Click-based command-line interface for the CryptoLab cipher engine.
Provides subcommands to encrypt and decrypt with the classical cipher
catalog, profile a text sample, score a ciphertext against its
plaintext and inspect recorded performance metrics.

Usage::

    python -m cryptolab encrypt caesar "HELLO WORLD" --key 3
    python -m cryptolab decrypt vigenere "LXFOPVEFRNHR" --key LEMON
    python -m cryptolab encrypt hill "ACT" --key 6,24,1,13,16,10,20,17,15
    python -m cryptolab encrypt super_encryption "ATTACK AT DAWN" --key LEMON:ZEBRA
    python -m cryptolab analyze "LXFOPVEFRNHR..."
    python -m cryptolab compare "ATTACKATDAWN" "LXFOPVEFRNHR"
    python -m cryptolab --output html -f report.html analyze "..."
    python -m cryptolab ciphers

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import click

from labcore.config import LabConfig
from labcore.console import LabConsole
from labcore.logger import LabLogger
from labcore.models import RunResult

from cryptolab import __version__
from cryptolab.core.engine import CryptoLabEngine
from cryptolab.ciphers.registry import list_ciphers
from cryptolab.core.errors import CryptoLabError
from cryptolab.core.models import Mode
from cryptolab.metrics.tracker import PerformanceTracker, tracker_from_config
from cryptolab.output.console import CryptoLabDisplay
from cryptolab.output.report import CryptoLabReportGenerator

_TARGET_PREVIEW = 40


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.version_option(__version__, prog_name="cryptolab")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a CryptoLab configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json", "html"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file path (for JSON/HTML output).",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner and informational output.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: str,
    output_file: Optional[str],
    quiet: bool,
) -> None:
    """CryptoLab -- Classical Cipher Engine & Cryptanalysis Lab.

    Encrypt and decrypt with classical ciphers, profile letter
    frequencies and entropy, estimate key lengths and grade how much a
    cipher hides about its plaintext.
    """
    ctx.ensure_object(dict)

    try:
        lab_config = LabConfig.load(config)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--config") from exc
    settings = lab_config.global_settings
    logger = LabLogger(
        "cli",
        log_level=settings.effective_log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )

    console = LabConsole(quiet=quiet)
    tracker = tracker_from_config(lab_config.metrics, logger=logger)

    ctx.obj["config"] = lab_config
    ctx.obj["output_format"] = output
    ctx.obj["output_file"] = output_file
    ctx.obj["quiet"] = quiet
    ctx.obj["logger"] = logger
    ctx.obj["console"] = console
    ctx.obj["tracker"] = tracker
    ctx.obj["engine"] = CryptoLabEngine(lab_config, tracker=tracker)
    ctx.obj["display"] = CryptoLabDisplay(console)
    ctx.obj["reporter"] = CryptoLabReportGenerator()

    # metrics decides for itself: its csv/json exports go to stdout
    if ctx.invoked_subcommand != "metrics":
        _show_banner(ctx)


# ===================================================================== #
#  Helpers
# ===================================================================== #

def _show_banner(ctx: click.Context) -> None:
    if not ctx.obj["quiet"] and ctx.obj["output_format"] == "console":
        ctx.obj["console"].banner(version=__version__)


def _preview(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= _TARGET_PREVIEW:
        return text
    return text[:_TARGET_PREVIEW - 3] + "..."


def _fail(ctx: click.Context, exc: CryptoLabError) -> None:
    """Log and print a domain error, then exit with status 1."""
    logger: LabLogger = ctx.obj["logger"]
    logger.error("%s: %s", type(exc).__name__, exc, command=ctx.info_name)
    click.echo(f"Error: {exc}", err=True)
    ctx.exit(1)


def _handle_output(ctx: click.Context, result: RunResult) -> None:
    """Write *result* as JSON or HTML according to ``--output``."""
    output_format = ctx.obj["output_format"]
    output_file = ctx.obj["output_file"]
    reporter: CryptoLabReportGenerator = ctx.obj["reporter"]
    console: LabConsole = ctx.obj["console"]

    if output_format == "json":
        if output_file:
            path = reporter.generate_json(result, Path(output_file))
            console.success(f"JSON report saved to: {path}")
        else:
            click.echo(reporter.to_json(result))
    elif output_format == "html":
        if output_file:
            path = Path(output_file)
        else:
            output_dir = Path(ctx.obj["config"].global_settings.output_dir)
            path = output_dir / f"cryptolab_{result.command}.html"
        reporter.generate_html(result, path)
        console.success(f"HTML report saved to: {path}")


def _transform(ctx: click.Context, mode: Mode, cipher: str, text: str, key: Optional[str]) -> None:
    engine: CryptoLabEngine = ctx.obj["engine"]
    display: CryptoLabDisplay = ctx.obj["display"]

    result = RunResult(command=mode.value, target=f"{cipher}: {_preview(text)}")
    try:
        run = engine.run(cipher, key, text, mode)
    except CryptoLabError as exc:
        _fail(ctx, exc)
        return

    result.payload = {"run": run.model_dump(mode="json")}
    result.finalize(summary=f"{run.cipher} {mode.value}: {len(run.output_text)} characters")

    if ctx.obj["output_format"] == "console":
        display.display_run(run)
        if ctx.obj["quiet"]:
            # Quiet mode still yields the result for shell pipelines
            click.echo(run.output_text)
    else:
        _handle_output(ctx, result)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

_key_option = click.option(
    "--key", "-k",
    default=None,
    help=(
        "Cipher key: shift or rail count (3), keyword (LEMON), Hill matrix "
        "entries row by row (3,3,2,5) or two keywords (LEMON:ZEBRA)."
    ),
)


@cli.command()
@click.argument("cipher")
@click.argument("text")
@_key_option
@click.pass_context
def encrypt(ctx: click.Context, cipher: str, text: str, key: Optional[str]) -> None:
    """Encrypt TEXT with CIPHER (see ``cryptolab ciphers``)."""
    _transform(ctx, Mode.ENCRYPT, cipher, text, key)


@cli.command()
@click.argument("cipher")
@click.argument("text")
@_key_option
@click.pass_context
def decrypt(ctx: click.Context, cipher: str, text: str, key: Optional[str]) -> None:
    """Decrypt TEXT with CIPHER."""
    _transform(ctx, Mode.DECRYPT, cipher, text, key)


@cli.command()
@click.argument("text")
@click.pass_context
def analyze(ctx: click.Context, text: str) -> None:
    """Frequency, entropy and key-length analysis of TEXT.

    Computes letter frequencies against English, the Index of
    Coincidence, Shannon and conditional entropy, digraphs and
    trigraphs, and Kasiski and Friedman key-length estimates.
    """
    engine: CryptoLabEngine = ctx.obj["engine"]
    display: CryptoLabDisplay = ctx.obj["display"]

    report = engine.analyze(text)
    result = RunResult(
        command="analyze",
        target=_preview(text),
        findings=report.findings,
        payload={"analysis": report.model_dump(mode="json")},
    ).finalize()

    if ctx.obj["output_format"] == "console":
        display.display_analysis(report)
    else:
        _handle_output(ctx, result)


@cli.command()
@click.argument("plaintext")
@click.argument("ciphertext")
@click.pass_context
def compare(ctx: click.Context, plaintext: str, ciphertext: str) -> None:
    """Score how well CIPHERTEXT hides the statistics of PLAINTEXT."""
    engine: CryptoLabEngine = ctx.obj["engine"]
    display: CryptoLabDisplay = ctx.obj["display"]

    report = engine.compare(plaintext, ciphertext)
    result = RunResult(
        command="compare",
        target=_preview(ciphertext),
        findings=report.findings,
        payload={"comparison": report.model_dump(mode="json")},
    ).finalize(
        summary=(
            f"Security grade {report.security.grade.value} "
            f"({report.security.overall:.1f}/100)"
        )
    )

    if ctx.obj["output_format"] == "console":
        display.display_comparison(report)
    else:
        _handle_output(ctx, result)


@cli.command()
@click.pass_context
def ciphers(ctx: click.Context) -> None:
    """List the cipher catalog."""
    catalog = list_ciphers()
    if ctx.obj["output_format"] == "console":
        ctx.obj["display"].display_catalog(catalog)
        return

    result = RunResult(
        command="ciphers",
        target="catalog",
        payload={"ciphers": [info.model_dump(mode="json") for info in catalog]},
    ).finalize(summary=f"{len(catalog)} ciphers")
    _handle_output(ctx, result)


@cli.command()
@click.option(
    "--format", "fmt",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    help="Export format for the recorded metrics.",
)
@click.option("--clear", is_flag=True, default=False, help="Delete recorded metrics.")
@click.pass_context
def metrics(ctx: click.Context, fmt: str, clear: bool) -> None:
    """Show performance metrics recorded by earlier runs.

    Metrics only persist across invocations with the ``jsonl`` sink
    (``[metrics] sink = "jsonl"`` in the configuration file).
    """
    if fmt == "table" or clear:
        _show_banner(ctx)

    tracker: Optional[PerformanceTracker] = ctx.obj["tracker"]
    if tracker is None:
        ctx.obj["console"].warning("Metrics are disabled in the configuration.")
        return

    if clear:
        tracker.clear()
        ctx.obj["console"].success("Metrics cleared.")
        return

    if fmt == "json":
        click.echo(tracker.export_json())
    elif fmt == "csv":
        click.echo(tracker.export_csv(), nl=False)
    else:
        display: CryptoLabDisplay = ctx.obj["display"]
        display.display_metrics(tracker.summary())
        comparison: dict[str, Any] = tracker.algorithm_comparison()
        if comparison:
            ctx.obj["console"].table(
                "By Algorithm",
                ["Algorithm", "Runs", "Avg time (ms)", "Avg efficiency"],
                [
                    (name, int(stats["count"]), f"{stats['average_time_ms']:.3f}",
                     f"{stats['average_efficiency']:.1f}")
                    for name, stats in sorted(comparison.items())
                ],
            )


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the CryptoLab CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
