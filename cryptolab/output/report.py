"""
CryptoLab Report Generator
===========================

Writes :class:`~labcore.models.RunResult` envelopes to disk as JSON or
as a self-contained HTML page. The HTML report inlines its CSS so it
can be mailed or archived as a single file, and renders the parts of
the payload it recognises: the cipher output, the letter-frequency
profile and the security grade. Everything else lands in a raw data
block.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Any, Optional

from labcore.models import RunResult

from cryptolab import __version__


_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>CryptoLab Report - {title}</title>
    <style>
        :root {{
            --bg: #0d1117;
            --panel: #161b22;
            --panel-alt: #21262d;
            --text: #c9d1d9;
            --muted: #8b949e;
            --cyan: #58a6ff;
            --green: #3fb950;
            --yellow: #d29922;
            --red: #f85149;
            --purple: #bc8cff;
            --line: #30363d;
        }}
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            font-family: -apple-system, 'Segoe UI', Helvetica, Arial, sans-serif;
            background: var(--bg);
            color: var(--text);
            line-height: 1.6;
            padding: 2rem;
        }}
        .container {{ max-width: 1100px; margin: 0 auto; }}
        header {{
            text-align: center;
            padding: 1.5rem;
            border: 1px solid var(--cyan);
            border-radius: 8px;
            margin-bottom: 2rem;
            background: var(--panel);
        }}
        header h1 {{ color: var(--cyan); font-size: 1.8rem; }}
        header .subtitle {{ color: var(--muted); font-size: 0.9rem; }}
        section {{
            background: var(--panel);
            border: 1px solid var(--line);
            border-radius: 8px;
            padding: 1.5rem;
            margin-bottom: 1.5rem;
        }}
        section h2 {{
            color: var(--purple);
            font-size: 1.3rem;
            margin-bottom: 1rem;
            border-bottom: 1px solid var(--line);
        }}
        table {{ width: 100%; border-collapse: collapse; margin: 0.5rem 0; }}
        th, td {{ padding: 0.5rem 0.8rem; text-align: left; border: 1px solid var(--line); }}
        th {{ background: var(--panel-alt); color: var(--cyan); }}
        code, pre {{ font-family: 'SFMono-Regular', Consolas, monospace; }}
        pre {{
            background: var(--panel-alt);
            padding: 1rem;
            border-radius: 4px;
            overflow-x: auto;
            font-size: 0.85rem;
            color: var(--muted);
        }}
        .badge {{ padding: 0.2rem 0.6rem; border-radius: 4px; font-weight: 700; font-size: 0.8rem; }}
        .severity-high {{ background: rgba(248, 81, 73, 0.25); color: var(--red); }}
        .severity-medium {{ background: rgba(210, 153, 34, 0.25); color: var(--yellow); }}
        .severity-low {{ background: rgba(88, 166, 255, 0.2); color: var(--cyan); }}
        .severity-info {{ background: rgba(63, 185, 80, 0.2); color: var(--green); }}
        .finding {{
            padding: 0.8rem 1rem;
            margin: 0.5rem 0;
            border-left: 4px solid var(--line);
            background: var(--panel-alt);
        }}
        .finding p {{ color: var(--muted); font-size: 0.9rem; }}
        .grade {{
            display: inline-block;
            padding: 0.4rem 1.4rem;
            border-radius: 8px;
            font-size: 2rem;
            font-weight: 800;
            border: 2px solid var(--line);
        }}
        .grade-good {{ color: var(--green); border-color: var(--green); }}
        .grade-fair {{ color: var(--yellow); border-color: var(--yellow); }}
        .grade-poor {{ color: var(--red); border-color: var(--red); }}
        .bar {{ height: 12px; background: var(--cyan); border-radius: 6px; }}
        footer {{ text-align: center; color: var(--muted); font-size: 0.8rem; margin-top: 2rem; }}
    </style>
</head>
<body>
    <div class="container">
        <header>
            <h1>CryptoLab :: {command}</h1>
            <div class="subtitle">{target}<br>Generated: {timestamp}</div>
        </header>

        <section>
            <h2>Summary</h2>
            <p>{summary}</p>
            <table>
                <tr><th>Command</th><td>{command}</td><th>Duration</th><td>{duration}</td></tr>
                <tr><th>Findings</th><td>{finding_count}</td><th>Severity</th><td>{severity}</td></tr>
            </table>
        </section>

        {details_html}

        <section>
            <h2>Findings</h2>
            {findings_html}
        </section>

        {raw_data_section}

        <footer>CryptoLab v{version} | Classical Cipher Engine &amp; Cryptanalysis Lab</footer>
    </div>
</body>
</html>
"""

_GRADE_CLASSES: dict[str, str] = {
    "A+": "grade-good",
    "A": "grade-good",
    "B": "grade-fair",
    "C": "grade-fair",
    "D": "grade-poor",
    "F": "grade-poor",
}


class CryptoLabReportGenerator:
    """Render RunResult envelopes as JSON or HTML.

    Usage::

        reporter = CryptoLabReportGenerator()
        reporter.generate_html(result, Path("report.html"))
        print(reporter.to_json(result))
    """

    def to_json(self, result: RunResult) -> str:
        """Serialise *result* with a small metadata header."""
        report = {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": "cryptolab",
                "version": __version__,
            },
            "duration_seconds": result.duration_seconds,
            "severity_counts": result.severity_counts,
            **result.model_dump(mode="json"),
        }
        return json.dumps(report, indent=2, ensure_ascii=False, default=str)

    def generate_json(self, result: RunResult, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_json(result), encoding="utf-8")
        return output_path

    def to_html(self, result: RunResult, title: Optional[str] = None) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        counts = result.severity_counts
        duration = result.duration_seconds
        return _HTML_TEMPLATE.format(
            title=escape(title or f"{result.command} {result.target}"),
            command=escape(result.command),
            target=escape(result.target),
            timestamp=timestamp,
            summary=escape(result.summary),
            duration=f"{duration:.3f}s" if duration is not None else "-",
            finding_count=len(result.findings),
            severity=", ".join(f"{k}: {v}" for k, v in counts.items() if v) or "none",
            details_html=self._build_details_html(result.payload),
            findings_html=self._build_findings_html(result),
            raw_data_section=self._build_raw_data_section(result),
            version=__version__,
        )

    def generate_html(
        self,
        result: RunResult,
        output_path: Path,
        title: Optional[str] = None,
    ) -> Path:
        """Write the HTML report for *result* and return its path."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_html(result, title), encoding="utf-8")
        return output_path

    # ------------------------------------------------------------------ #
    #  HTML builders
    # ------------------------------------------------------------------ #

    def _build_details_html(self, payload: dict[str, Any]) -> str:
        parts: list[str] = []

        run = payload.get("run")
        if run:
            parts.append(
                "<section><h2>Cipher Output</h2><table>"
                f"<tr><th>Cipher</th><td>{escape(str(run['cipher']))}</td></tr>"
                f"<tr><th>Mode</th><td>{escape(str(run['mode']))}</td></tr>"
                f"<tr><th>Input</th><td><code>{escape(run['input_text'])}</code></td></tr>"
                f"<tr><th>Output</th><td><code>{escape(run['output_text'])}</code></td></tr>"
                "</table></section>"
            )

        comparison = payload.get("comparison")
        if comparison:
            parts.append(self._security_html(comparison["security"], comparison["entropy"]))
            analysis = comparison["ciphertext"]
        else:
            analysis = payload.get("analysis")
        if analysis:
            parts.append(self._frequency_html(analysis))

        return "\n".join(parts)

    @staticmethod
    def _security_html(security: dict[str, Any], entropy: dict[str, Any]) -> str:
        grade = security["grade"]
        recs = "".join(f"<li>{escape(r)}</li>" for r in security["recommendations"])
        return (
            "<section><h2>Security Score</h2>"
            f'<p><span class="grade {_GRADE_CLASSES.get(grade, "")}">{escape(grade)}</span> '
            f'{security["overall"]:.1f} / 100</p>'
            "<table>"
            f'<tr><th>Entropy score</th><td>{security["entropy_score"]:.1f}</td>'
            f'<th>Frequency score</th><td>{security["frequency_score"]:.0f}</td></tr>'
            f'<tr><th>IC score</th><td>{security["ic_score"]:.1f}</td>'
            f'<th>Entropy gain</th><td>{entropy["percent_improvement"]:+.1f}% '
            f'({escape(entropy["quality"])})</td></tr>'
            f"</table><ul>{recs}</ul></section>"
        )

    @staticmethod
    def _frequency_html(analysis: dict[str, Any]) -> str:
        freq = analysis["frequency"]
        letters = freq["table"]["letters"]
        peak = max((entry["percentage"] for entry in letters), default=0.0) or 1.0
        rows = "".join(
            f"<tr><td>{entry['letter']}</td><td>{entry['count']}</td>"
            f"<td>{entry['percentage']:.2f}</td>"
            f'<td><div class="bar" style="width: {entry["percentage"] / peak * 100:.0f}%">'
            "</div></td></tr>"
            for entry in letters
        )
        ic = freq["ic"]
        entropy = analysis["entropy"]
        return (
            "<section><h2>Letter Frequencies</h2>"
            f"<p>IC {ic['value']:.4f} ({escape(ic['interpretation'])}) | "
            f"entropy {entropy['entropy']:.4f} bits ({escape(entropy['rating'])}) | "
            f"chi-squared {freq['comparison']['chi_squared']:.2f}</p>"
            "<table><tr><th>Letter</th><th>Count</th><th>%</th><th></th></tr>"
            f"{rows}</table></section>"
        )

    @staticmethod
    def _build_findings_html(result: RunResult) -> str:
        if not result.findings:
            return '<p class="finding">No findings.</p>'

        html_parts: list[str] = []
        for finding in result.findings:
            severity = finding.severity
            html_parts.append(
                '<div class="finding">'
                f'<h3><span class="badge {severity.css_class}">{severity.value}</span> '
                f"{escape(finding.title)}</h3>"
                f"<p>{escape(finding.description)}</p>"
            )
            if finding.recommendation:
                html_parts.append(
                    f"<p><strong>Recommendation:</strong> {escape(finding.recommendation)}</p>"
                )
            if finding.references:
                refs = ", ".join(escape(r) for r in finding.references)
                html_parts.append(f"<p>References: {refs}</p>")
            html_parts.append("</div>")
        return "\n".join(html_parts)

    @staticmethod
    def _build_raw_data_section(result: RunResult) -> str:
        if not result.payload:
            return ""
        dumped = json.dumps(result.payload, indent=2, ensure_ascii=False, default=str)
        return f"<section><h2>Raw Data</h2><pre>{escape(dumped)}</pre></section>"
