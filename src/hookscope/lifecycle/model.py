"""Record model base classes with declarative lifecycle callbacks.

Callbacks are declared in the class body by calling the event entry
points directly:

    class Ticket(Announcements, Model):
        before_save("set_title", "set_body")
        before_save("upcase_title", if_="title_is_a_shout")

The metaclass prepares a CallbackRegistry for every class before its
body runs and exposes the registry's entry points in the class
namespace. Concern bases register their callbacks first, then the body
registers in declaration order.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any

from hookscope.lifecycle.registry import CallbackRegistry
from hookscope.lifecycle.types import CALLBACK_EVENTS

logger = logging.getLogger(__name__)

# Names injected into the class namespace while the body runs
_HELPER_NAMES = (*CALLBACK_EVENTS, "include")


def _forward(registry: CallbackRegistry, event: str, *targets: Any, **options: Any) -> None:
    # Looked up per call so entry points replaced after preparation still apply
    getattr(registry, event)(*targets, **options)


class Concern:
    """Mixin that contributes callbacks to every model including it.

    Override included() to register callbacks on the including model's
    registry:

        class Announcements(Concern):
            @staticmethod
            def included(callbacks):
                callbacks.after_save("announce_save")
    """

    @staticmethod
    def included(callbacks: CallbackRegistry) -> None:
        pass


class ModelMeta(type):
    """Metaclass giving each model its own callback registry."""

    @classmethod
    def __prepare__(mcs, name, bases, **kwargs):
        parents = [base.__dict__["__callbacks__"] for base in _model_bases(bases)]
        registry = CallbackRegistry(name, parents)

        # Extensions attach before any concern or body registration
        for extension in _extensions(bases):
            extension(registry)

        for base in bases:
            # Models mixing in a concern are Concern subclasses too; their
            # concerns arrive through the inherited registry instead
            if _is_concern(base):
                registry.include(base)

        helpers: dict[str, Callable[..., Any]] = {
            event: functools.partial(_forward, registry, event) for event in CALLBACK_EVENTS
        }
        helpers["include"] = registry.include

        namespace: dict[str, Any] = dict(helpers)
        namespace["__callbacks__"] = registry
        namespace["__callback_helpers__"] = helpers
        return namespace

    def __new__(mcs, name, bases, namespace, **kwargs):
        namespace = dict(namespace)
        helpers = namespace.pop("__callback_helpers__", {})
        for helper_name in _HELPER_NAMES:
            # Keep anything the body redefined under the same name
            if helper_name in namespace and namespace[helper_name] is helpers.get(helper_name):
                del namespace[helper_name]

        if "__callbacks__" not in namespace:
            # Created without __prepare__, e.g. ModelMeta(name, bases, attrs)
            namespace["__callbacks__"] = CallbackRegistry(
                name, [base.__dict__["__callbacks__"] for base in _model_bases(bases)]
            )
        return super().__new__(mcs, name, bases, namespace, **kwargs)


def _is_concern(base: Any) -> bool:
    return (
        isinstance(base, type)
        and issubclass(base, Concern)
        and base is not Concern
        and not isinstance(base, ModelMeta)
    )


def _model_bases(bases: tuple[type, ...]) -> list[type]:
    seen: list[type] = []
    for base in bases:
        for klass in base.__mro__:
            if isinstance(klass.__dict__.get("__callbacks__"), CallbackRegistry):
                if klass not in seen:
                    seen.append(klass)
                break
    return seen


def _extensions(bases: tuple[type, ...]) -> list[Callable[[CallbackRegistry], Any]]:
    extensions: list[Callable[[CallbackRegistry], Any]] = []
    for base in bases:
        for extension in getattr(base, "__callback_extensions__", ()):
            if extension not in extensions:
                extensions.append(extension)
    return extensions


def _class_entry_point(event: str):
    def register_event(cls, *targets, **options):
        getattr(cls.__callbacks__, event)(*targets, **options)

    register_event.__name__ = event
    register_event.__doc__ = f"Register {event} callbacks on a loaded model."
    return register_event


for _event in CALLBACK_EVENTS:
    setattr(ModelMeta, _event, _class_entry_point(_event))


class Model(metaclass=ModelMeta):
    """Base class for records with lifecycle callbacks.

    Persistence is in memory: saving marks the record persisted and
    destroying marks it destroyed. The point of the class is running
    callback chains in the right order around those actions.
    """

    def __init__(self, **attributes: Any):
        self.persisted = False
        self.destroyed = False
        self.errors: list[str] = []
        for key, value in attributes.items():
            setattr(self, key, value)
        self.run_callbacks("initialize")

    @classmethod
    def instantiate(cls, **attributes: Any) -> "Model":
        """Hydrate a persisted record, running find then initialize callbacks."""
        record = cls.__new__(cls)
        record.persisted = True
        record.destroyed = False
        record.errors = []
        for key, value in attributes.items():
            setattr(record, key, value)
        record.run_callbacks("find")
        record.run_callbacks("initialize")
        return record

    def run_callbacks(self, kind: str, action: Callable[[], Any] | None = None) -> bool:
        """Run the before, around and after chains for a callback kind.

        Around callbacks receive a proceed callable that runs the rest of
        the chain and finally the action. A before callback returning
        False halts the chain, as does an action returning False or an
        around callback that never proceeds.

        Returns:
            True if the action ran to completion and after callbacks ran
        """
        registry: CallbackRegistry = type(self).__callbacks__

        for callback in registry.chain(f"before_{kind}"):
            if callback.applies_to(self) and callback.invoke(self) is False:
                logger.debug(
                    "%s: before_%s halted by %r",
                    type(self).__name__,
                    kind,
                    callback.target,
                )
                return False

        around = [c for c in registry.chain(f"around_{kind}") if c.applies_to(self)]
        completed = False

        def run(index: int) -> None:
            nonlocal completed
            if index == len(around):
                completed = action is None or action() is not False
                return
            around[index].invoke(self, lambda: run(index + 1))

        run(0)
        if not completed:
            return False

        for callback in registry.chain(f"after_{kind}"):
            if callback.applies_to(self):
                callback.invoke(self)
        return True

    def validate(self) -> None:
        """Override to append messages to self.errors."""
        pass

    def valid(self) -> bool:
        self.errors = []
        if not self.run_callbacks("validation", self.validate):
            return False
        return not self.errors

    def save(self) -> bool:
        """Validate and persist the record.

        Runs validation, then save callbacks wrapped around create or
        update callbacks, then commit callbacks. A halted save runs
        rollback callbacks instead of commit callbacks.
        """
        if not self.valid():
            return False

        kind = "update" if self.persisted else "create"

        def persist() -> bool:
            return self.run_callbacks(kind, self._write)

        if not self.run_callbacks("save", persist):
            self.rollback()
            return False

        self.run_callbacks("commit")
        return True

    def destroy(self) -> bool:
        if not self.run_callbacks("destroy", self._delete):
            self.rollback()
            return False
        self.run_callbacks("commit")
        return True

    def touch(self) -> bool:
        return self.run_callbacks("touch")

    def rollback(self) -> bool:
        return self.run_callbacks("rollback")

    def _write(self) -> None:
        self.persisted = True

    def _delete(self) -> None:
        self.destroyed = True
