"""
CryptoLab Configuration Management
===================================

Configuration for the cipher engine, the analyzers and the metrics sink,
read from a TOML file and overridable per key from the environment.

Lookup order for every setting (last wins):

1. dataclass default,
2. ``[section] key`` in the TOML file,
3. ``CRYPTOLAB_<SECTION>_<KEY>`` environment variable
   (e.g. ``CRYPTOLAB_GLOBAL_LOG_LEVEL=DEBUG``, ``CRYPTOLAB_METRICS_SINK=jsonl``).

References:
    - Wiggins, A. (2011). The Twelve-Factor App, III. Config.
      https://12factor.net/config
    - TOML v1.0.0. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import os
import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"
_ENV_PREFIX = "CRYPTOLAB_"
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_METRIC_SINKS = frozenset({"memory", "jsonl"})
_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


def _single_letter(name: str, value: Any) -> str:
    if not isinstance(value, str) or len(value) != 1 or not ("A" <= value.upper() <= "Z"):
        raise ValueError(f"{name} must be a single letter A-Z, got {value!r}")
    return value.upper()


@dataclass(slots=True)
class CipherConfig:
    """Options handed to every cipher the engine builds.

    ``filler`` pads transposition grids and Hill blocks;
    ``playfair_filler`` splits doubled letters and odd digraphs.
    ``preserve_format`` keeps case and punctuation in the Caesar cipher.
    """

    filler: str = "X"
    playfair_filler: str = "X"
    strip_padding: bool = True
    preserve_format: bool = False

    def __post_init__(self) -> None:
        self.filler = _single_letter("cipher.filler", self.filler)
        self.playfair_filler = _single_letter("cipher.playfair_filler", self.playfair_filler)
        if self.playfair_filler == "J":
            raise ValueError("cipher.playfair_filler cannot be J (merged with I)")


@dataclass(slots=True)
class AnalysisConfig:
    """Thresholds and limits for the statistics layer.

    The Index of Coincidence boundaries are heuristics (English is about
    0.066, uniform random text about 0.038), hence configurable.

    Reference:
        Friedman, W. F. (1922). The Index of Coincidence and Its
        Applications in Cryptanalysis. Riverbank Publication No. 22.
    """

    ic_monoalphabetic: float = 0.06
    ic_ambiguous: float = 0.045
    digraph_top_k: int = 20
    trigraph_top_k: int = 15
    kasiski_min_length: int = 3
    kasiski_max_length: int = 6
    max_key_length: int = 20
    key_length_candidates: int = 5

    def __post_init__(self) -> None:
        if not 0.0 < self.ic_ambiguous < self.ic_monoalphabetic < 1.0:
            raise ValueError(
                "analysis thresholds must satisfy 0 < ic_ambiguous < ic_monoalphabetic < 1"
            )
        if not 2 <= self.kasiski_min_length <= self.kasiski_max_length:
            raise ValueError("analysis.kasiski_min_length must be >= 2 and <= kasiski_max_length")
        if self.max_key_length < 2:
            raise ValueError("analysis.max_key_length must be >= 2")


@dataclass(slots=True)
class MetricsConfig:
    """Where performance metrics go.

    ``sink`` is ``"memory"`` (lost at exit) or ``"jsonl"`` (appended to
    ``path``, so the ``metrics`` command can read them back). Either sink
    keeps at most ``history_limit`` records.
    """

    enabled: bool = True
    sink: str = "memory"
    path: str = "output/metrics.jsonl"
    history_limit: int = 100


@dataclass(slots=True)
class GlobalConfig:
    """Logging and report output settings."""

    log_level: str = "INFO"
    log_file: str | None = None
    log_json: bool = False
    output_dir: str = "output"
    debug: bool = False

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"global.log_level must be one of {sorted(_LOG_LEVELS)}")

    @property
    def effective_log_level(self) -> str:
        """``DEBUG`` when *debug* is set, otherwise *log_level*."""
        return "DEBUG" if self.debug else self.log_level


_SECTIONS: dict[str, type] = {
    "global": GlobalConfig,
    "cipher": CipherConfig,
    "analysis": AnalysisConfig,
    "metrics": MetricsConfig,
}


@dataclass(slots=True)
class LabConfig:
    """All configuration sections.

    Usage:
        >>> config = LabConfig.load()                  # <project root>/config.toml
        >>> config = LabConfig.load("lab.toml", env={})
        >>> config.analysis.max_key_length
        20
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    cipher: CipherConfig = field(default_factory=CipherConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)

    def __post_init__(self) -> None:
        if self.metrics.sink not in _METRIC_SINKS:
            raise ValueError(f"metrics.sink must be one of {sorted(_METRIC_SINKS)}")

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> LabConfig:
        """Build a configuration from TOML plus environment overrides.

        Args:
            path: TOML file. ``None`` means ``<project root>/config.toml``,
                  which may be absent (defaults are used).
            env:  Environment to read overrides from; ``os.environ`` if
                  ``None``. Pass ``{}`` to ignore the environment.

        Raises:
            FileNotFoundError: An explicit *path* does not exist.
            ValueError: A value fails validation or an override cannot be
                converted to the field's type.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
        raw: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "rb") as fh:
                raw = tomllib.load(fh)
        elif path is not None:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        environ = os.environ if env is None else env
        sections = {
            name: cls._build_section(section_cls, name, raw.get(name, {}), environ)
            for name, section_cls in _SECTIONS.items()
        }
        return cls(
            global_settings=sections["global"],
            cipher=sections["cipher"],
            analysis=sections["analysis"],
            metrics=sections["metrics"],
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def _build_section(
        section_cls: type, name: str, data: Mapping[str, Any], environ: Mapping[str, str]
    ) -> Any:
        """Instantiate *section_cls* from its TOML table and the environment.

        Keys the dataclass does not declare are ignored, so config files
        written for newer versions still load.
        """
        values: dict[str, Any] = {}
        for f in fields(section_cls):
            if f.name in data:
                values[f.name] = data[f.name]
            env_value = environ.get(f"{_ENV_PREFIX}{name}_{f.name}".upper())
            if env_value is not None:
                default = getattr(section_cls(), f.name)
                values[f.name] = _convert(env_value, default, f"{name}.{f.name}")
        return section_cls(**values)


def _convert(value: str, default: Any, name: str) -> Any:
    """Convert an environment string to the type of *default*."""
    if isinstance(default, bool):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"{name} expects a boolean, got {value!r}")
    if isinstance(default, (int, float)):
        try:
            return type(default)(value)
        except ValueError as exc:
            raise ValueError(f"{name} expects {type(default).__name__}, got {value!r}") from exc
    return value
