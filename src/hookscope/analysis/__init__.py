"""Callback analysis and reporting for collected models."""

from hookscope.analysis.locator import SourceLocator
from hookscope.analysis.service import (
    ModelAnalysis,
    analyze,
    calculate_permutations,
    report,
)
from hookscope.analysis.types import (
    AggregateReport,
    CallbackAnalysis,
    is_external,
    lines_between,
)

__all__ = [
    "AggregateReport",
    "CallbackAnalysis",
    "ModelAnalysis",
    "SourceLocator",
    "analyze",
    "calculate_permutations",
    "is_external",
    "lines_between",
    "report",
]
