"""Per-model callback registry.

Each model class owns one CallbackRegistry. The registry exposes one
registration entry point per event (before_save, after_commit, ...),
all forwarding to register(). Integrations such as the collector may
replace those entry points on a registry instance to observe
registrations.
"""

import logging
from collections.abc import Iterable
from typing import Any

from hookscope.lifecycle.types import CALLBACK_EVENTS, Callback, Target, as_guards

logger = logging.getLogger(__name__)


class CallbackRegistry:
    """Callback chains for a single model class.

    A registry created for a subclass starts with copies of its parents'
    chains, so inherited callbacks keep running on subclasses.

    Example:
        registry.before_save("set_title", "set_body")
        registry.after_save("notify", if_="published")
    """

    def __init__(self, owner_name: str, parents: Iterable["CallbackRegistry"] = ()):
        self.owner_name = owner_name
        self.chains: dict[str, list[Callback]] = {event: [] for event in CALLBACK_EVENTS}
        self.included: list[type] = []
        # Integration state keyed by integration name
        self.extensions: dict[str, Any] = {}

        for index, parent in enumerate(parents):
            for event, chain in parent.chains.items():
                own = self.chains[event]
                for callback in chain:
                    # Later parents only contribute what the first did not
                    if index == 0 or callback not in own:
                        own.append(callback)
            for concern in parent.included:
                if concern not in self.included:
                    self.included.append(concern)

    def register(
        self,
        event: str,
        *targets: Target,
        if_: Any = None,
        unless: Any = None,
        prepend: bool = False,
    ) -> None:
        """Append callbacks for an event.

        Args:
            event: One of CALLBACK_EVENTS
            targets: Method names and/or callables taking the record
            if_: Guard (or list of guards) that must pass
            unless: Guard (or list of guards) that must fail
            prepend: Insert at the front of the chain instead of the end

        Raises:
            ValueError: If the event is not recognized
        """
        if event not in self.chains:
            raise ValueError(
                f"Unknown callback event '{event}'. "
                "Valid events: " + ", ".join(CALLBACK_EVENTS)
            )

        callbacks = [
            Callback(event, target, if_=as_guards(if_), unless=as_guards(unless))
            for target in targets
        ]
        chain = self.chains[event]
        if prepend:
            chain[:0] = callbacks
        else:
            chain.extend(callbacks)

        logger.debug(
            "%s: registered %d %s callback(s)", self.owner_name, len(callbacks), event
        )

    def include(self, concern: type) -> None:
        """Run a concern's included() hook against this registry once."""
        if concern in self.included:
            return
        self.included.append(concern)
        concern.included(self)

    def chain(self, event: str) -> list[Callback]:
        """Callbacks for an event in invocation order."""
        return list(self.chains.get(event, ()))


def _entry_point(event: str):
    def register_event(self, *targets, if_=None, unless=None, prepend=False):
        self.register(event, *targets, if_=if_, unless=unless, prepend=prepend)

    register_event.__name__ = event
    register_event.__qualname__ = f"CallbackRegistry.{event}"
    register_event.__doc__ = f"Register {event} callbacks."
    return register_event


for _event in CALLBACK_EVENTS:
    setattr(CallbackRegistry, _event, _entry_point(_event))
