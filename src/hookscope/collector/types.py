"""Collector data types.

- SourceSite: file and line of a declaration or definition
- Conditional: which guard keyword a registration used
- CallbackRecord: one registered (event, target, guard) triple
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

# Target recorded for inline callables, which have no name to resolve
BLOCK_TARGET = "<block>"


class Conditional(Enum):
    """Guard attached to a callback registration."""

    NONE = "none"
    IF = "if"
    UNLESS = "unless"


@dataclass(frozen=True)
class SourceSite:
    """A position in a source file."""

    file_path: str
    line_number: int

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line_number}"


@dataclass(frozen=True)
class CallbackRecord:
    """A single callback registration as declared.

    Attributes:
        event: Phase-qualified event name (e.g., "before_save")
        declaration_site: Where the registration statement is
        target: Method name, or BLOCK_TARGET for inline callables
        conditional: Guard keyword used, if any
        conditional_target: Guard method name; None for block guards,
            guard lists and unrecognized guard shapes
    """

    event: str
    declaration_site: SourceSite
    target: str
    conditional: Conditional = Conditional.NONE
    conditional_target: str | None = None

    @property
    def is_block(self) -> bool:
        return self.target == BLOCK_TARGET

    @property
    def is_conditional(self) -> bool:
        return self.conditional is not Conditional.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "file_path": self.declaration_site.file_path,
            "line_number": self.declaration_site.line_number,
            "target": self.target,
            "conditional": None if self.conditional is Conditional.NONE else self.conditional.value,
            "conditional_target": self.conditional_target,
        }
