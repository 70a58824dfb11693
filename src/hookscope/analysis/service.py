"""Callback analysis for collected models.

Turns a model's collected records into enriched CallbackAnalysis
entries and an AggregateReport. Nothing here is cached or mutated:
each call recomputes from the model's ledger.
"""

import logging
from collections.abc import Iterable

from hookscope.analysis.locator import SourceLocator
from hookscope.analysis.types import AggregateReport, CallbackAnalysis, is_external
from hookscope.collector.service import ledger_for
from hookscope.collector.types import CallbackRecord, Conditional
from hookscope.core.config import AnalysisConfig

logger = logging.getLogger(__name__)


def calculate_permutations(callbacks: Iterable[CallbackRecord | CallbackAnalysis]) -> int:
    """Count the possible shapes of callback execution.

    Every guarded callback may run or not, so an event with k guarded
    callbacks can execute in 2**k ways; unguarded callbacks always run
    and add nothing. Events are independent and summed, and events with
    no callbacks contribute nothing.
    """
    conditionals_by_event: dict[str, int] = {}
    for callback in callbacks:
        count = conditionals_by_event.setdefault(callback.event, 0)
        if callback.conditional is not Conditional.NONE:
            conditionals_by_event[callback.event] = count + 1

    return sum(2**count for count in conditionals_by_event.values())


class ModelAnalysis:
    """Callback analysis of a single model.

    Attributes:
        model_name: Class name of the model
        model_file_path: File declaring the model (None if unknown)
        model_first_line: First line of the class body
        model_last_line: Last line of the class body
        callbacks: Analyzed callbacks in declaration order
    """

    def __init__(
        self,
        model: type,
        records: Iterable[CallbackRecord],
        config: AnalysisConfig | None = None,
        locator: SourceLocator | None = None,
    ):
        self.model = model
        self.config = config if config is not None else AnalysisConfig.from_env()
        self.locator = locator if locator is not None else SourceLocator()

        self.model_name = model.__name__
        file_path, first, last = self.locator.model_extent(model)
        self.model_file_path = file_path
        self.model_first_line = first
        self.model_last_line = last

        self.callbacks = [self._analyze(record) for record in records]

    def _analyze(self, record: CallbackRecord) -> CallbackAnalysis:
        target_site = None
        if not record.is_block:
            target_site = self.locator.locate(self.model, record.target)
            if target_site is None:
                logger.debug(
                    "%s: %s target '%s' could not be located",
                    self.model_name,
                    record.event,
                    record.target,
                )

        guard_site = None
        if record.conditional_target is not None:
            guard_site = self.locator.locate(self.model, record.conditional_target)

        return CallbackAnalysis(
            record=record,
            is_external_declaration=bool(is_external(record.declaration_site, self.model_file_path)),
            target_site=target_site,
            is_external_target=is_external(target_site, self.model_file_path),
            conditional_target_site=guard_site,
            is_external_conditional_target=is_external(guard_site, self.model_file_path),
        )

    @property
    def analyzed_callbacks(self) -> dict[str, list[CallbackAnalysis]]:
        """Analyzed callbacks grouped by event."""
        groups: dict[str, list[CallbackAnalysis]] = {}
        for callback in self.callbacks:
            groups.setdefault(callback.event, []).append(callback)
        return groups

    @property
    def analyzed_callbacks_array(self) -> list[CallbackAnalysis]:
        return list(self.callbacks)

    @property
    def analyzed_callbacks_count(self) -> int:
        return len(self.callbacks)

    @property
    def callbacks_count(self) -> int:
        return len(self.callbacks)

    @property
    def conditionals_count(self) -> int:
        return sum(1 for c in self.callbacks if c.conditional is not Conditional.NONE)

    @property
    def lines_between_count(self) -> int:
        return sum(c.lines_to_target for c in self.callbacks if c.lines_to_target is not None)

    @property
    def included_callbacks_count(self) -> int:
        return sum(1 for c in self.callbacks if c.is_external_declaration)

    @property
    def external_targets_count(self) -> int:
        return sum(1 for c in self.callbacks if c.is_external_target)

    @property
    def external_conditional_targets_count(self) -> int:
        return sum(1 for c in self.callbacks if c.is_external_conditional_target)

    @property
    def calculated_permutations(self) -> int:
        return calculate_permutations(self.callbacks)

    def report(self) -> AggregateReport:
        return AggregateReport(
            model_name=self.model_name,
            model_file_path=self.config.display_path(self.model_file_path),
            callbacks_count=self.callbacks_count,
            conditionals_count=self.conditionals_count,
            lines_between_count=self.lines_between_count,
            included_callbacks_count=self.included_callbacks_count,
            external_targets_count=self.external_targets_count,
            external_conditional_targets_count=self.external_conditional_targets_count,
            calculated_permutations=self.calculated_permutations,
        )


def analyze(
    model: type,
    config: AnalysisConfig | None = None,
    locator: SourceLocator | None = None,
) -> ModelAnalysis:
    """Analyze a collected model.

    Raises:
        InstallationError: If the collector is not installed on the model
    """
    return ModelAnalysis(model, ledger_for(model).records(), config=config, locator=locator)


def report(model: type, config: AnalysisConfig | None = None) -> AggregateReport:
    """Aggregate callback report for a collected model."""
    return analyze(model, config=config).report()
