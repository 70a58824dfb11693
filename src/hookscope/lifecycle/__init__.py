"""Record model lifecycle callbacks.

Models declare callbacks in their class body, one entry point per
lifecycle event:
- before/after validation
- before/around/after save, create, update and destroy
- after commit, rollback, find, initialize and touch

Usage:
    from hookscope.lifecycle import Model

    class Ticket(Model):
        before_save("set_title", "set_body")
        before_save("upcase_title", if_="title_is_a_shout")
"""

from hookscope.lifecycle.model import Concern, Model, ModelMeta
from hookscope.lifecycle.registry import CallbackRegistry
from hookscope.lifecycle.types import (
    CALLBACK_EVENTS,
    CALLBACK_KINDS,
    Callback,
    as_guards,
    check_guard,
)

__all__ = [
    "CALLBACK_EVENTS",
    "CALLBACK_KINDS",
    "Callback",
    "CallbackRegistry",
    "Concern",
    "Model",
    "ModelMeta",
    "as_guards",
    "check_guard",
]
