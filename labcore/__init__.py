"""
CryptoLab Shared Module
=======================

Common utilities, models, and configuration management shared by the
CryptoLab cipher engine and its command-line front end.
"""

from labcore.config import LabConfig
from labcore.models import Finding, RunResult, Severity

__all__ = ["Finding", "LabConfig", "RunResult", "Severity"]
