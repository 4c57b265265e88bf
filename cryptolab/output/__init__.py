"""
CryptoLab Output Module
========================

Console display and report generation for CryptoLab results.
"""

from cryptolab.output.console import CryptoLabDisplay
from cryptolab.output.report import CryptoLabReportGenerator

__all__ = [
    "CryptoLabDisplay",
    "CryptoLabReportGenerator",
]
