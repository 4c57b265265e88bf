"""
CryptoLab Shared Data Models
=============================

Pydantic v2 models shared by every CryptoLab component. These models
carry the observations ("findings") an analysis produces and the
run-level envelope the CLI and report generators consume.

Finding structure is loosely inspired by SARIF result objects.

References:
    - SARIF v2.1.0 Specification (OASIS, 2020).
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import datetime as _dt
import json as _json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


# ========================== Enumerations ===================================


class Severity(str, Enum):
    """How strongly an observation speaks against a cipher's output.

    Attributes:
        HIGH:   The ciphertext leaks structure an attacker can exploit
                directly (e.g. English letter frequencies survive).
        MEDIUM: Weakness that needs additional analysis to exploit.
        LOW:    Minor statistical bias.
        INFO:   Informational observation; no direct weakness.
    """

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

    @property
    def css_class(self) -> str:
        """Return a CSS class name for severity-based styling."""
        return f"severity-{self.value.lower()}"


# ========================== Core Models ====================================


class Finding(BaseModel):
    """A single observation produced by a CryptoLab analysis.

    Attributes:
        severity:       Qualitative severity rating.
        title:          Short, descriptive finding title.
        description:    Detailed explanation of the finding.
        evidence:       Raw numbers supporting the finding.
        recommendation: Suggested follow-up.
        references:     External references or citations.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="ignore",
    )

    severity: Severity = Field(..., description="Severity level of this finding")
    title: str = Field(..., min_length=1, max_length=256)
    description: str = Field(..., min_length=1)
    evidence: str = Field(default="", description="Supporting evidence")
    recommendation: str = Field(default="")
    references: list[str] = Field(default_factory=list)

    @field_validator("evidence", mode="before")
    @classmethod
    def _coerce_evidence(cls, v: Any) -> str:
        """Auto-convert non-string evidence (dict, list) to JSON string."""
        if isinstance(v, str):
            return v
        if isinstance(v, (dict, list)):
            return _json.dumps(v, ensure_ascii=False, default=str)
        return str(v)


class RunResult(BaseModel):
    """Envelope around one CLI invocation.

    Bundles the command, its input label, the findings produced and
    timing information into a single serialisable object suitable for
    report generation.

    Attributes:
        command:    CLI command that produced the result.
        target:     Short label for the analysed input.
        start_time: UTC timestamp when the run started.
        end_time:   UTC timestamp when the run ended.
        findings:   Observations produced by the run.
        summary:    Human-readable summary text.
        payload:    Command-specific result data (model dumps).
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    command: str = Field(..., min_length=1)
    target: str = Field(default="")
    start_time: _dt.datetime = Field(default_factory=_utcnow)
    end_time: Optional[_dt.datetime] = None
    findings: list[Finding] = Field(default_factory=list)
    summary: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def duration_seconds(self) -> float | None:
        """Elapsed run time in seconds, or ``None`` if *end_time* is unset."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    @property
    def severity_counts(self) -> dict[str, int]:
        """Count of findings grouped by severity name."""
        counts: dict[str, int] = {s.value: 0 for s in Severity}
        for finding in self.findings:
            counts[finding.severity.value] += 1
        return counts

    def finalize(self, summary: str | None = None) -> RunResult:
        """Stamp *end_time* and fill in *summary*.

        If *summary* is ``None`` a default is generated from severity counts.

        Returns:
            ``self`` for fluent chaining.
        """
        self.end_time = _utcnow()
        if summary is not None:
            self.summary = summary
        else:
            parts = [
                f"{sev}: {cnt}" for sev, cnt in self.severity_counts.items() if cnt
            ]
            self.summary = (
                f"{self.command} complete. Findings: {len(self.findings)} "
                f"({', '.join(parts) if parts else 'none'})"
            )
        return self
