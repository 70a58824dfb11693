"""Analysis result types.

- CallbackAnalysis: a collected record enriched with resolved sites
- AggregateReport: scalar summary for one model
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from hookscope.collector.types import CallbackRecord, Conditional, SourceSite

if TYPE_CHECKING:
    from hookscope.core.config import AnalysisConfig


def lines_between(origin: SourceSite | None, destination: SourceSite | None) -> int | None:
    """Signed line distance between two sites in the same file, else None."""
    if origin is None or destination is None:
        return None
    if origin.file_path != destination.file_path:
        return None
    return destination.line_number - origin.line_number


def is_external(site: SourceSite | None, model_file_path: str | None) -> bool | None:
    """Whether a site lies outside the model's own file; None if unknown."""
    if site is None:
        return None
    return site.file_path != model_file_path


@dataclass(frozen=True)
class CallbackAnalysis:
    """A callback record with its target and guard resolved.

    Attributes:
        record: The collected registration
        is_external_declaration: Declared outside the model's file
        target_site: Where the target method is defined; None for
            blocks and methods that could not be located
        is_external_target: Target defined outside the model's file
        conditional_target_site: Where the guard method is defined
        is_external_conditional_target: Guard defined outside the model's file
    """

    record: CallbackRecord
    is_external_declaration: bool
    target_site: SourceSite | None = None
    is_external_target: bool | None = None
    conditional_target_site: SourceSite | None = None
    is_external_conditional_target: bool | None = None

    @property
    def event(self) -> str:
        return self.record.event

    @property
    def declaration_site(self) -> SourceSite:
        return self.record.declaration_site

    @property
    def target(self) -> str:
        return self.record.target

    @property
    def conditional(self) -> Conditional:
        return self.record.conditional

    @property
    def conditional_target(self) -> str | None:
        return self.record.conditional_target

    @property
    def lines_to_target(self) -> int | None:
        return lines_between(self.declaration_site, self.target_site)

    @property
    def lines_to_conditional_target(self) -> int | None:
        return lines_between(self.declaration_site, self.conditional_target_site)

    def to_dict(self, config: AnalysisConfig | None = None) -> dict[str, Any]:
        display = config.display_path if config is not None else _plain_path
        target_site = self.target_site
        guard_site = self.conditional_target_site
        return {
            "callback": self.event,
            "callback_file_path": display(self.declaration_site.file_path),
            "callback_line_number": self.declaration_site.line_number,
            "external_callback": self.is_external_declaration,
            "target": self.target,
            "target_file_path": display(target_site.file_path) if target_site else None,
            "target_line_number": target_site.line_number if target_site else None,
            "external_target": self.is_external_target,
            "lines_to_target": self.lines_to_target,
            "conditional": None if self.conditional is Conditional.NONE else self.conditional.value,
            "conditional_target": self.conditional_target,
            "conditional_target_file_path": display(guard_site.file_path) if guard_site else None,
            "conditional_target_line_number": guard_site.line_number if guard_site else None,
            "external_conditional_target": self.is_external_conditional_target,
            "lines_to_conditional_target": self.lines_to_conditional_target,
        }


def _plain_path(path: str | None) -> str | None:
    return path


@dataclass(frozen=True)
class AggregateReport:
    """Summary of a model's callback wiring."""

    model_name: str
    model_file_path: str | None
    callbacks_count: int
    conditionals_count: int
    lines_between_count: int
    included_callbacks_count: int
    external_targets_count: int
    external_conditional_targets_count: int
    calculated_permutations: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
