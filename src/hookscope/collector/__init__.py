"""Callback registration collector.

Records every lifecycle-callback registration made on a model: where it
was declared, what it targets and which guard gates it.

Usage:
    from hookscope.collector import Analyzed, collect

    class Ticket(Analyzed, Model):
        before_save("set_title")

    collect(Ticket)["before_save"]
"""

from hookscope.collector.ledger import CallbackLedger
from hookscope.collector.service import (
    Analyzed,
    attach,
    build_records,
    collect,
    declaration_site,
    install,
    ledger_for,
)
from hookscope.collector.types import (
    BLOCK_TARGET,
    CallbackRecord,
    Conditional,
    SourceSite,
)

__all__ = [
    "Analyzed",
    "BLOCK_TARGET",
    "CallbackLedger",
    "CallbackRecord",
    "Conditional",
    "SourceSite",
    "attach",
    "build_records",
    "collect",
    "declaration_site",
    "install",
    "ledger_for",
]
