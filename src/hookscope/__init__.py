"""hookscope — structural analysis of lifecycle callback chains.

Collects every callback a model registers and reports how many there
are per event, how far declarations sit from the methods they call, how
many are conditionally gated and how many execution permutations the
guards allow.

Usage:
    from hookscope import Analyzed, collect, report
    from hookscope.lifecycle import Model

    class Ticket(Analyzed, Model):
        before_save("set_title", "set_body")

    collect(Ticket)   # {"before_save": [CallbackRecord, CallbackRecord]}
    report(Ticket)    # AggregateReport(callbacks_count=2, ...)
"""

from hookscope.analysis import AggregateReport, CallbackAnalysis, ModelAnalysis, analyze, report
from hookscope.collector import Analyzed, CallbackRecord, collect, install
from hookscope.core.config import AnalysisConfig
from hookscope.core.errors import ConfigurationError, HookscopeError, InstallationError

__all__ = [
    "AggregateReport",
    "AnalysisConfig",
    "Analyzed",
    "CallbackAnalysis",
    "CallbackRecord",
    "ConfigurationError",
    "HookscopeError",
    "InstallationError",
    "ModelAnalysis",
    "analyze",
    "collect",
    "install",
    "report",
]
