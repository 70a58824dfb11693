"""Lifecycle callback types.

Defines the recognized callback events and the Callback entry stored in
each model's callback chains.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

CALLBACK_KINDS = (
    "commit",
    "create",
    "destroy",
    "find",
    "initialize",
    "rollback",
    "save",
    "touch",
    "update",
    "validation",
)

CALLBACK_EVENTS = (
    "after_commit",
    "after_create",
    "after_destroy",
    "after_find",
    "after_initialize",
    "after_rollback",
    "after_save",
    "after_touch",
    "after_update",
    "after_validation",
    "around_create",
    "around_destroy",
    "around_save",
    "around_update",
    "before_create",
    "before_destroy",
    "before_save",
    "before_update",
    "before_validation",
)

# A callback target is a method name or a callable taking the record
Target = str | Callable[..., Any]


def as_guards(spec: Any) -> tuple[Any, ...]:
    """Normalize an if_/unless specification to a tuple of guards."""
    if spec is None:
        return ()
    if isinstance(spec, (list, tuple)):
        return tuple(spec)
    return (spec,)


def check_guard(record: Any, guard: Any) -> bool:
    """Evaluate a single guard against a record.

    Method names are called (or read, for plain attributes), callables
    receive the record, and anything else is taken as a constant.
    """
    if isinstance(guard, str):
        value = getattr(record, guard)
        return bool(value() if callable(value) else value)
    if callable(guard):
        return bool(guard(record))
    return bool(guard)


@dataclass(frozen=True)
class Callback:
    """A registered callback in a model's chain.

    Attributes:
        event: Phase-qualified event name (e.g., "before_save")
        target: Method name or callable
        if_: Guards that must all pass
        unless: Guards that must all fail
    """

    event: str
    target: Target
    if_: tuple[Any, ...] = ()
    unless: tuple[Any, ...] = ()

    @property
    def phase(self) -> str:
        return self.event.split("_", 1)[0]

    @property
    def kind(self) -> str:
        return self.event.split("_", 1)[1]

    def applies_to(self, record: Any) -> bool:
        """Check whether the guards allow this callback to run."""
        if not all(check_guard(record, g) for g in self.if_):
            return False
        return not any(check_guard(record, g) for g in self.unless)

    def invoke(self, record: Any, *args: Any) -> Any:
        if isinstance(self.target, str):
            return getattr(record, self.target)(*args)
        return self.target(record, *args)
