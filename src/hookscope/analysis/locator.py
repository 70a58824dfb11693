"""Source locations of model methods and classes."""

import functools
import inspect
import logging
from typing import Any

from hookscope.collector.types import SourceSite

logger = logging.getLogger(__name__)


class SourceLocator:
    """Resolves where methods and classes are defined.

    Backed by inspect, which reads the source files. Every lookup
    returns None instead of raising when the definition cannot be found
    (dynamically created methods, builtins, missing files).
    """

    def locate(self, model: type, name: str) -> SourceSite | None:
        """Definition site of a method on a model (or one of its bases)."""
        try:
            attr = inspect.getattr_static(model, name)
        except AttributeError:
            logger.debug("%s has no attribute '%s'", model.__name__, name)
            return None

        return self.locate_object(_unwrap_descriptor(attr))

    def locate_object(self, obj: Any) -> SourceSite | None:
        try:
            func = inspect.unwrap(obj)
            file_path = inspect.getsourcefile(func)
            _, line = inspect.getsourcelines(func)
        except (OSError, TypeError, ValueError):
            logger.debug("Cannot locate source for %r", obj)
            return None

        if file_path is None:
            return None
        return SourceSite(file_path, line)

    def model_extent(self, model: type) -> tuple[str | None, int | None, int | None]:
        """Declaring file and first/last line of a model's class body."""
        try:
            file_path = inspect.getsourcefile(model)
        except TypeError:
            return None, None, None

        try:
            lines, first = inspect.getsourcelines(model)
        except (OSError, TypeError):
            return file_path, None, None

        return file_path, first, first + len(lines) - 1


def _unwrap_descriptor(attr: Any) -> Any:
    if isinstance(attr, (staticmethod, classmethod)):
        return attr.__func__
    if isinstance(attr, property):
        return attr.fget
    if isinstance(attr, functools.cached_property):
        return attr.func
    return attr
