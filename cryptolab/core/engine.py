"""
CryptoLab Engine
=================

Central orchestrator for the CryptoLab cipher engine. The
:class:`CryptoLabEngine` runs cipher transforms, feeds text through the
analyzers and turns the statistics into reports and findings.

Architecture follows the Facade pattern (Gamma et al., 1994), providing
a simplified interface over the cipher registry and the individual
analyzer subsystems. Transforms and analyzers stay pure; the engine only
adds configuration, logging and the injected performance tracker.

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
      Addison-Wesley.
    - Friedman, W. F. (1922). The Index of Coincidence and Its
      Applications in Cryptanalysis.
    - Kasiski, F. W. (1863). Die Geheimschriften und die
      Dechiffrir-Kunst.
"""

from __future__ import annotations

from typing import Any, Optional

from labcore.config import LabConfig
from labcore.logger import LabLogger
from labcore.models import Finding, Severity

from cryptolab.analyzers.entropy import EntropyAnalyzer
from cryptolab.analyzers.frequency import FrequencyAnalyzer
from cryptolab.analyzers.key_length import KeyLengthEstimator
from cryptolab.analyzers.scoring import SecurityScorer
from cryptolab.ciphers.base import BaseCipher
from cryptolab.ciphers.registry import get_cipher
from cryptolab.core.models import (
    AnalysisReport,
    CipherRun,
    ComparisonReport,
    EntropyComparison,
    EntropyQuality,
    FrequencyReport,
    ICInterpretation,
    KeyLengthEstimate,
    Mode,
    RandomnessLevel,
    SecurityGrade,
    SecurityScore,
)
from cryptolab.core.text import normalize
from cryptolab.metrics.tracker import PerformanceTracker

# Below this many letters the statistics are flagged as unreliable
MIN_RELIABLE_LENGTH: int = 50

_GRADE_SEVERITY: dict[SecurityGrade, Severity] = {
    SecurityGrade.A_PLUS: Severity.INFO,
    SecurityGrade.A: Severity.INFO,
    SecurityGrade.B: Severity.LOW,
    SecurityGrade.C: Severity.LOW,
    SecurityGrade.D: Severity.MEDIUM,
    SecurityGrade.F: Severity.HIGH,
}


class CryptoLabEngine:
    """Runs ciphers and cryptanalysis over text samples.

    Usage::

        engine = CryptoLabEngine(tracker=PerformanceTracker())
        run = engine.run("vigenere", "LEMON", "Attack at dawn", "encrypt")
        report = engine.analyze(run.output_text)
        comparison = engine.compare("Attack at dawn", run.output_text)

    Attributes:
        config: CryptoLab configuration instance.
        tracker: Caller-owned performance tracker, or ``None``.
        logger: Logger for the engine.
    """

    def __init__(
        self,
        config: Optional[LabConfig] = None,
        tracker: Optional[PerformanceTracker] = None,
        logger: Optional[LabLogger] = None,
    ) -> None:
        self.config = config or LabConfig()
        self.tracker = tracker
        settings = self.config.global_settings
        self.logger = logger or LabLogger(
            "engine",
            log_level=settings.effective_log_level,
            log_file=settings.log_file,
            json_logs=settings.log_json,
        )

        analysis = self.config.analysis
        self._frequency = FrequencyAnalyzer(
            ic_monoalphabetic=analysis.ic_monoalphabetic,
            ic_ambiguous=analysis.ic_ambiguous,
            digraph_top_k=analysis.digraph_top_k,
            trigraph_top_k=analysis.trigraph_top_k,
        )
        self._entropy = EntropyAnalyzer()
        self._key_length = KeyLengthEstimator(
            min_sequence=analysis.kasiski_min_length,
            max_sequence=analysis.kasiski_max_length,
            candidates=analysis.key_length_candidates,
        )
        self._scorer = SecurityScorer()

    # ------------------------------------------------------------------ #
    #  Cipher runs
    # ------------------------------------------------------------------ #

    def build_cipher(self, name: str, key: Any = None) -> BaseCipher:
        """Instantiate a catalog cipher with the configured options."""
        cipher_cfg = self.config.cipher
        is_playfair = name.strip().lower() == "playfair"
        filler = cipher_cfg.playfair_filler if is_playfair else cipher_cfg.filler
        return get_cipher(
            name,
            key,
            filler=filler,
            strip_padding=cipher_cfg.strip_padding,
            preserve_format=cipher_cfg.preserve_format,
        )

    def run(
        self,
        cipher: str | BaseCipher,
        key: Any = None,
        text: str = "",
        mode: Mode | str = Mode.ENCRYPT,
        *,
        visualize: bool = True,
    ) -> CipherRun:
        """Encrypt or decrypt *text* and record the intermediate state.

        *cipher* is a catalog name (then *key* is required for keyed
        ciphers) or an already constructed cipher (then *key* is ignored).

        Raises:
            CryptoLabError: Invalid key, invalid input or an unsupported
                cipher. Nothing is returned on failure.
        """
        mode = Mode(mode)
        with self.logger.operation(mode.value):
            instance = (
                cipher if isinstance(cipher, BaseCipher) else self.build_cipher(cipher, key)
            )
            self.logger.info("Running %s (%d chars)", instance.name, len(text))

            metric = None
            if self.tracker is not None:
                with self.tracker.track(
                    instance.name, len(normalize(text)), mode.value
                ) as measurement:
                    output = instance.transform(text, mode)
                    measurement.output_size = len(output)
                metric = measurement.metric
            else:
                output = instance.transform(text, mode)

            view = instance.visualize(text, mode) if visualize else None

        return CipherRun(
            cipher=instance.name,
            mode=mode,
            input_text=text,
            output_text=output,
            visualization=view,
            metric=metric,
        )

    def encrypt(self, cipher: str | BaseCipher, key: Any, text: str) -> str:
        return self.run(cipher, key, text, Mode.ENCRYPT, visualize=False).output_text

    def decrypt(self, cipher: str | BaseCipher, key: Any, text: str) -> str:
        return self.run(cipher, key, text, Mode.DECRYPT, visualize=False).output_text

    # ------------------------------------------------------------------ #
    #  Analysis
    # ------------------------------------------------------------------ #

    def analyze(self, text: str) -> AnalysisReport:
        """Full statistical profile of one text sample."""
        max_len = self.config.analysis.max_key_length
        with self.logger.operation("analyze"), self.logger.timed("analysis"):
            frequency = self._frequency.report(text)
            entropy = self._entropy.normalized_entropy(text)
            key_length = self._key_length.estimate_key_length(text, max_len)
            report = AnalysisReport(
                text_length=frequency.table.total,
                frequency=frequency,
                entropy=entropy,
                conditional_entropy=self._entropy.conditional_entropy(text),
                entropy_rate=self._entropy.entropy_rate(text),
                key_length=key_length,
                friedman=self._key_length.friedman_key_lengths(text, max_len),
                findings=self._analysis_findings(frequency, entropy.rating, key_length),
            )
        self.logger.info(
            "Analysed %d letters: IC=%.4f H=%.3f",
            report.text_length,
            frequency.ic.value,
            entropy.entropy,
        )
        return report

    def compare(self, plaintext: str, ciphertext: str) -> ComparisonReport:
        """Analyse both texts and score how much the cipher hid."""
        plain_report = self.analyze(plaintext)
        cipher_report = self.analyze(ciphertext)
        entropy = self._entropy.compare_entropy(plaintext, ciphertext)
        security = self._scorer.score(cipher_report.entropy, cipher_report.frequency)
        return ComparisonReport(
            plaintext=plain_report,
            ciphertext=cipher_report,
            entropy=entropy,
            security=security,
            findings=self._comparison_findings(entropy, security),
        )

    # ------------------------------------------------------------------ #
    #  Findings
    # ------------------------------------------------------------------ #

    @staticmethod
    def _analysis_findings(
        frequency: FrequencyReport,
        rating: RandomnessLevel,
        key_length: Optional[KeyLengthEstimate],
    ) -> list[Finding]:
        findings: list[Finding] = []
        ic = frequency.ic
        total = frequency.table.total

        if total == 0:
            return [
                Finding(
                    severity=Severity.INFO,
                    title="No letters to analyse",
                    description="The text contains no characters A-Z after cleaning.",
                )
            ]

        if total < MIN_RELIABLE_LENGTH:
            findings.append(Finding(
                severity=Severity.INFO,
                title="Short sample",
                description=(
                    f"Only {total} letters; frequency statistics below "
                    f"{MIN_RELIABLE_LENGTH} letters are unreliable."
                ),
            ))

        if ic.interpretation is ICInterpretation.MONOALPHABETIC:
            english = frequency.comparison.is_english_like
            findings.append(Finding(
                severity=Severity.HIGH if english else Severity.MEDIUM,
                title=(
                    "English letter frequencies preserved"
                    if english
                    else "Monoalphabetic frequency profile"
                ),
                description=(
                    f"IC {ic.value:.4f} matches a single substitution alphabet "
                    f"or a transposition. Frequency analysis applies directly."
                ),
                evidence={
                    "ic": round(ic.value, 6),
                    "chi_squared": round(frequency.comparison.chi_squared, 3),
                    "p_value": round(frequency.comparison.p_value, 6),
                },
                recommendation="Use a polyalphabetic or product cipher.",
                references=["Friedman, W. F. (1922). The Index of Coincidence."],
            ))
        elif ic.interpretation is ICInterpretation.AMBIGUOUS:
            findings.append(Finding(
                severity=Severity.LOW,
                title="Mixed frequency profile",
                description=(
                    f"IC {ic.value:.4f} lies between monoalphabetic and "
                    f"polyalphabetic text; a short repeating key is likely."
                ),
                evidence={"ic": round(ic.value, 6)},
            ))
        else:
            findings.append(Finding(
                severity=Severity.INFO,
                title="Flat frequency profile",
                description=f"IC {ic.value:.4f} is close to random letters.",
                evidence={"ic": round(ic.value, 6)},
            ))

        if key_length is not None and key_length.most_likely is not None:
            findings.append(Finding(
                severity=Severity.MEDIUM,
                title="Repeating key period detected",
                description=(
                    f"Kasiski examination suggests a key length of "
                    f"{key_length.most_likely} "
                    f"({len(key_length.repeated_sequences)} repeated sequences)."
                ),
                evidence={
                    "gcd": key_length.gcd,
                    "candidates": [c.model_dump() for c in key_length.candidates],
                },
                recommendation="Use a key at least as long as the message.",
                references=["Kasiski, F. W. (1863). Die Geheimschriften."],
            ))

        if rating in (RandomnessLevel.LOW, RandomnessLevel.VERY_LOW):
            findings.append(Finding(
                severity=Severity.INFO,
                title="Low letter entropy",
                description=rating.description,
            ))
        return findings

    @staticmethod
    def _comparison_findings(
        entropy: EntropyComparison, security: SecurityScore
    ) -> list[Finding]:
        findings = [
            Finding(
                severity=_GRADE_SEVERITY[security.grade],
                title=f"Security grade {security.grade.value}",
                description=" ".join(security.recommendations),
                evidence={
                    "overall": security.overall,
                    "entropy": round(security.entropy_score, 2),
                    "frequency": security.frequency_score,
                    "ic": round(security.ic_score, 2),
                },
            )
        ]
        if entropy.quality is EntropyQuality.POOR:
            findings.append(Finding(
                severity=Severity.MEDIUM,
                title="No entropy gain",
                description=(
                    f"Ciphertext entropy changed by "
                    f"{entropy.percent_improvement:.1f}% relative to the plaintext."
                ),
                recommendation="Substitution with a longer key raises letter entropy.",
            ))
        return findings
