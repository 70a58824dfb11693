"""Callback registration collector.

Wraps a model's registration entry points so every registration is
handed, unchanged, to the original entry point and recorded once that
entry point accepts it. Runtime invocation of callbacks is never touched.
"""

import functools
import inspect
import logging
import os
from collections.abc import Callable, Iterable
from typing import Any

from hookscope.collector.ledger import CallbackLedger
from hookscope.collector.types import BLOCK_TARGET, CallbackRecord, Conditional, SourceSite
from hookscope.core.errors import InstallationError
from hookscope.lifecycle.types import CALLBACK_EVENTS

logger = logging.getLogger(__name__)

LEDGER_KEY = "hookscope.ledger"

# Frames under this directory belong to hookscope itself
_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) + os.sep


def declaration_site() -> SourceSite:
    """Site of the first caller frame outside the hookscope package."""
    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_code.co_filename.startswith(_PACKAGE_DIR):
            frame = frame.f_back
        if frame is None:
            return SourceSite("<unknown>", 0)
        return SourceSite(frame.f_code.co_filename, frame.f_lineno)
    finally:
        del frame


def _conditional(if_: Any, unless: Any) -> tuple[Conditional, str | None]:
    # An empty guard list gates nothing at runtime
    if isinstance(if_, (list, tuple)) and not if_:
        if_ = None
    if isinstance(unless, (list, tuple)) and not unless:
        unless = None

    if if_ is not None:
        kind, spec = Conditional.IF, if_
    elif unless is not None:
        kind, spec = Conditional.UNLESS, unless
    else:
        return Conditional.NONE, None

    if isinstance(spec, str):
        return kind, spec
    if callable(spec) or isinstance(spec, (list, tuple)):
        # Present but not resolvable to a single method
        return kind, None

    logger.warning(
        "Unsupported %s guard %r; recording it without a target", kind.value, spec
    )
    return kind, None


def build_records(
    event: str,
    targets: Iterable[Any],
    if_: Any,
    unless: Any,
    site: SourceSite,
) -> list[CallbackRecord]:
    """One record per target of a single registration."""
    conditional, conditional_target = _conditional(if_, unless)

    records = []
    for target in targets:
        if isinstance(target, str):
            name = target
        else:
            if not callable(target):
                logger.warning("Unsupported %s target %r; recording it as a block", event, target)
            name = BLOCK_TARGET
        records.append(
            CallbackRecord(
                event=event,
                declaration_site=site,
                target=name,
                conditional=conditional,
                conditional_target=conditional_target,
            )
        )
    return records


def _intercept(event: str, register: Callable[..., Any], ledger: CallbackLedger):
    @functools.wraps(register)
    def intercepted(*targets, if_=None, unless=None, **options):
        records = build_records(event, targets, if_, unless, declaration_site())
        result = register(*targets, if_=if_, unless=unless, **options)
        # Only registrations the host accepted are recorded
        ledger.extend(records)
        logger.debug("%s: collected %d %s record(s)", ledger.owner_name, len(records), event)
        return result

    return intercepted


def attach(registry: Any) -> CallbackLedger:
    """Wrap a registry's entry points and give it a ledger.

    Idempotent: attaching twice returns the existing ledger.

    Raises:
        InstallationError: If the registry lacks extension storage or
            any of the registration entry points
    """
    extensions = getattr(registry, "extensions", None)
    if not isinstance(extensions, dict):
        raise InstallationError(
            f"{registry!r} is not a callback registry: it has no extensions mapping"
        )

    existing = extensions.get(LEDGER_KEY)
    if existing is not None:
        return existing

    missing = [event for event in CALLBACK_EVENTS if not callable(getattr(registry, event, None))]
    if missing:
        raise InstallationError(
            f"{registry!r} is missing callback entry points: " + ", ".join(missing)
        )

    ledger = CallbackLedger(getattr(registry, "owner_name", repr(registry)))
    for event in CALLBACK_EVENTS:
        setattr(registry, event, _intercept(event, getattr(registry, event), ledger))
    extensions[LEDGER_KEY] = ledger
    return ledger


def install(model: type) -> CallbackLedger:
    """Start collecting callback registrations on a model.

    Registrations made on the model from now on are recorded, and
    subclasses defined later are collected into their own ledgers.

    Raises:
        InstallationError: If the model has no callback registry
    """
    registry = getattr(model, "__callbacks__", None)
    if registry is None:
        raise InstallationError(
            f"{getattr(model, '__name__', model)!r} does not expose a callback registry. "
            "Collected models must derive from hookscope.lifecycle.Model."
        )

    ledger = attach(registry)

    extensions = tuple(getattr(model, "__callback_extensions__", ()))
    if attach not in extensions:
        model.__callback_extensions__ = (*extensions, attach)
    return ledger


def ledger_for(model: type) -> CallbackLedger:
    """The ledger of a collected model.

    Raises:
        InstallationError: If the collector was never installed on it
    """
    registry = getattr(model, "__callbacks__", None)
    ledger = getattr(registry, "extensions", {}).get(LEDGER_KEY)
    if ledger is None:
        raise InstallationError(
            f"Callback collection is not installed on {getattr(model, '__name__', model)!r}. "
            "Mix in hookscope.Analyzed or call hookscope.install() before declaring callbacks."
        )
    return ledger


def collect(model: type) -> dict[str, list[CallbackRecord]]:
    """Collected records grouped by event, declaration order preserved."""
    return ledger_for(model).grouped()


class Analyzed:
    """Mixin that installs the collector when a model class is defined.

    List it among the model's bases so concern and class body
    registrations are all collected:

        class Ticket(Analyzed, Announcements, Model):
            before_save("set_title")
    """

    __callback_extensions__ = (attach,)
