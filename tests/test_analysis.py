"""Tests for callback analysis and reporting."""

import functools
import os
from pathlib import Path

import pytest

from fixtures import scenarios
from fixtures.announcements import Announcements
from fixtures.ticket import Ticket
from hookscope import AnalysisConfig, Analyzed, InstallationError, analyze, report
from hookscope.analysis import (
    AggregateReport,
    SourceLocator,
    calculate_permutations,
    is_external,
    lines_between,
)
from hookscope.collector import CallbackRecord, Conditional, SourceSite
from hookscope.lifecycle import Model

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _record(event, conditional=Conditional.NONE):
    return CallbackRecord(
        event=event,
        declaration_site=SourceSite("m.py", 1),
        target="t",
        conditional=conditional,
    )


@pytest.fixture
def config():
    return AnalysisConfig(root_path=FIXTURES_DIR.parent.parent, model_path=FIXTURES_DIR)


# =============================================================================
# Permutations
# =============================================================================


class TestCalculatePermutations:
    def test_no_callbacks(self):
        assert calculate_permutations([]) == 0

    def test_unconditional_group_counts_one(self):
        records = [_record("before_save"), _record("before_save"), _record("before_save")]
        assert calculate_permutations(records) == 1

    def test_group_is_two_to_the_conditionals(self):
        records = [
            _record("before_save", Conditional.IF),
            _record("before_save", Conditional.UNLESS),
            _record("before_save", Conditional.IF),
            _record("before_save"),
        ]
        assert calculate_permutations(records) == 8

    def test_unconditional_records_do_not_change_factor(self):
        guarded = [_record("after_save", Conditional.IF)]
        padded = guarded + [_record("after_save") for _ in range(5)]
        assert calculate_permutations(guarded) == calculate_permutations(padded) == 2

    def test_groups_are_summed(self):
        records = [
            _record("before_save", Conditional.IF),
            _record("after_save", Conditional.IF),
            _record("after_commit"),
        ]
        assert calculate_permutations(records) == 2 + 2 + 1

    def test_phases_are_separate_groups(self):
        records = [_record("before_save", Conditional.IF), _record("around_save", Conditional.IF)]
        assert calculate_permutations(records) == 4

    def test_empty_guard_list_adds_no_permutations(self, config):
        class Widget(Analyzed, Model):
            before_save("a", if_=[])
            before_save("b", unless=())

        summary = report(Widget, config)
        assert summary.conditionals_count == 0
        assert summary.calculated_permutations == 1


# =============================================================================
# Helpers
# =============================================================================


class TestLinesBetween:
    def test_same_file(self):
        assert lines_between(SourceSite("a.py", 4), SourceSite("a.py", 10)) == 6

    def test_negative_is_kept(self):
        assert lines_between(SourceSite("a.py", 10), SourceSite("a.py", 4)) == -6

    def test_different_files(self):
        assert lines_between(SourceSite("a.py", 4), SourceSite("b.py", 10)) is None

    def test_missing_site(self):
        assert lines_between(SourceSite("a.py", 4), None) is None


class TestIsExternal:
    def test_same_path(self):
        assert is_external(SourceSite("/app/models/ticket.py", 1), "/app/models/ticket.py") is False

    def test_same_basename_other_directory(self):
        assert is_external(SourceSite("/app/concerns/ticket.py", 1), "/app/models/ticket.py") is True

    def test_unknown_site(self):
        assert is_external(None, "/app/models/ticket.py") is None


# =============================================================================
# SourceLocator
# =============================================================================


def _decorated(fn):
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        return fn(*args, **kwargs)

    return wrapper


class Located:
    def plain(self):
        pass

    @staticmethod
    def static():
        pass

    @classmethod
    def klass(cls):
        pass

    @property
    def prop(self):
        return 1

    @_decorated
    def wrapped(self):
        pass

    dynamic = staticmethod(len)


class TestSourceLocator:
    @pytest.fixture
    def locator(self):
        return SourceLocator()

    def test_plain_method(self, locator):
        site = locator.locate(Located, "plain")
        assert site.file_path.endswith("test_analysis.py")
        assert site.line_number == Located.plain.__code__.co_firstlineno

    @pytest.mark.parametrize("name", ["static", "klass", "prop", "wrapped"])
    def test_descriptors_resolve(self, locator, name):
        site = locator.locate(Located, name)
        assert site is not None
        assert site.file_path.endswith("test_analysis.py")

    def test_missing_method(self, locator):
        assert locator.locate(Located, "nope") is None

    def test_builtin_is_unlocatable(self, locator):
        assert locator.locate(Located, "dynamic") is None

    def test_inherited_method_points_at_base(self, locator):
        site = locator.locate(Ticket, "announce_save")
        assert site.file_path.endswith(os.path.join("fixtures", "announcements.py"))
        assert site.line_number == 15

    def test_model_extent(self, locator):
        file_path, first, last = locator.model_extent(Ticket)
        assert file_path.endswith(os.path.join("fixtures", "ticket.py"))
        assert first == 8
        assert last == 22

    def test_model_extent_of_builtin(self, locator):
        assert locator.model_extent(int) == (None, None, None)


# =============================================================================
# Ticket analysis
# =============================================================================


class TestTicketAnalysis:
    @pytest.fixture
    def analysis(self, config):
        return analyze(Ticket, config=config)

    def test_model_coordinates(self, analysis):
        assert analysis.model_name == "Ticket"
        assert analysis.model_file_path.endswith(os.path.join("fixtures", "ticket.py"))
        assert analysis.model_first_line == 8
        assert analysis.model_last_line == 22

    def test_grouped_view(self, analysis):
        groups = analysis.analyzed_callbacks
        assert [c.target for c in groups["before_save"]] == [
            "<block>",
            "set_title",
            "set_body",
            "upcase_title",
        ]
        assert [c.target for c in groups["after_save"]] == ["announce_save"]
        assert analysis.analyzed_callbacks_count == 5
        assert len(analysis.analyzed_callbacks_array) == 5

    def test_block_has_no_target_site(self, analysis):
        block = analysis.analyzed_callbacks["before_save"][0]
        assert block.is_external_declaration is True
        assert block.target_site is None
        assert block.is_external_target is None
        assert block.lines_to_target is None

    def test_local_target(self, analysis):
        set_body = analysis.analyzed_callbacks["before_save"][2]
        assert set_body.is_external_declaration is False
        assert set_body.target_site.line_number == 15
        assert set_body.is_external_target is False
        assert set_body.lines_to_target == 6

    def test_guard_resolution(self, analysis):
        upcase = analysis.analyzed_callbacks["before_save"][3]
        assert upcase.lines_to_target == 8
        assert upcase.conditional_target_site.line_number == 21
        assert upcase.is_external_conditional_target is False
        assert upcase.lines_to_conditional_target == 11

    def test_concern_target(self, analysis):
        announce = analysis.analyzed_callbacks["after_save"][0]
        assert announce.is_external_declaration is True
        assert announce.is_external_target is True
        assert announce.lines_to_target == 5

    def test_report(self, analysis):
        assert analysis.report() == AggregateReport(
            model_name="Ticket",
            model_file_path="ticket.py",
            callbacks_count=5,
            conditionals_count=1,
            lines_between_count=22,
            included_callbacks_count=2,
            external_targets_count=1,
            external_conditional_targets_count=0,
            calculated_permutations=3,
        )

    def test_to_dict_uses_readable_paths(self, analysis, config):
        data = analysis.analyzed_callbacks["before_save"][3].to_dict(config)
        assert data == {
            "callback": "before_save",
            "callback_file_path": "ticket.py",
            "callback_line_number": 10,
            "external_callback": False,
            "target": "upcase_title",
            "target_file_path": "ticket.py",
            "target_line_number": 18,
            "external_target": False,
            "lines_to_target": 8,
            "conditional": "if",
            "conditional_target": "title_is_a_shout",
            "conditional_target_file_path": "ticket.py",
            "conditional_target_line_number": 21,
            "external_conditional_target": False,
            "lines_to_conditional_target": 11,
        }

    def test_to_dict_without_config_keeps_paths(self, analysis):
        data = analysis.analyzed_callbacks["after_save"][0].to_dict()
        assert os.path.isabs(data["callback_file_path"])
        assert data["conditional"] is None


# =============================================================================
# Report scenarios
# =============================================================================


class TestReportScenarios:
    def test_two_unconditional_targets(self, config):
        summary = report(scenarios.TwoTargets, config=config)
        assert summary.callbacks_count == 2
        assert summary.conditionals_count == 0
        assert summary.calculated_permutations == 1
        assert summary.lines_between_count == (11 - 9) + (14 - 9)

    def test_one_guarded_among_unguarded(self, config):
        summary = report(scenarios.OneGuarded, config=config)
        assert summary.callbacks_count == 2
        assert summary.conditionals_count == 1
        assert summary.calculated_permutations == 2

    def test_concern_contributes_external_declaration(self, config):
        analysis = analyze(scenarios.Audited, config=config)
        audit = analysis.analyzed_callbacks["after_save"][0]
        assert audit.is_external_declaration is True
        assert audit.declaration_site.file_path.endswith(os.path.join("fixtures", "auditing.py"))
        assert analysis.report().included_callbacks_count == 1

    def test_independent_events_sum(self, config):
        summary = report(scenarios.GuardedEvents, config=config)
        assert summary.conditionals_count == 2
        assert summary.calculated_permutations == 4

    def test_irregular_shapes(self, config):
        analysis = analyze(scenarios.Irregular, config=config)
        prepare, missing = analysis.analyzed_callbacks["before_validation"]
        block, listed = analysis.analyzed_callbacks["after_commit"]

        assert prepare.lines_to_target == -3

        assert missing.target_site is None
        assert missing.conditional_target == "missing_guard"
        assert missing.conditional_target_site is None
        assert missing.lines_to_conditional_target is None

        assert block.conditional is Conditional.IF
        assert block.conditional_target is None

        assert listed.conditional_target is None
        assert listed.lines_to_target == -6

        summary = analysis.report()
        assert summary.conditionals_count == 3
        assert summary.lines_between_count == -9
        assert summary.calculated_permutations == 2 + 4

    def test_model_without_collector(self):
        with pytest.raises(InstallationError):
            report(scenarios.Plain)

    def test_model_without_callbacks(self, config):
        class Empty(Analyzed, Model):
            pass

        summary = report(Empty, config=config)
        assert summary.callbacks_count == 0
        assert summary.calculated_permutations == 0

    def test_report_is_idempotent(self, config):
        assert report(Ticket, config=config) == report(Ticket, config=config)

    def test_report_without_paths_uses_absolute(self, monkeypatch, caplog):
        monkeypatch.delenv("HOOKSCOPE_ROOT_PATH", raising=False)
        monkeypatch.delenv("HOOKSCOPE_MODEL_PATH", raising=False)
        summary = report(Ticket)
        assert os.path.isabs(summary.model_file_path)
        assert "Using absolute paths" in caplog.text

    def test_report_to_dict(self, config):
        data = report(scenarios.OneGuarded, config=config).to_dict()
        assert data["model_name"] == "OneGuarded"
        assert data["model_file_path"] == "scenarios.py"
        assert data["calculated_permutations"] == 2


class TestCustomLocator:
    def test_injected_locator_is_used(self, config):
        class NowhereLocator(SourceLocator):
            def locate(self, model, name):
                return None

        analysis = analyze(Ticket, config=config, locator=NowhereLocator())
        assert all(c.target_site is None for c in analysis.callbacks)
        assert analysis.lines_between_count == 0
        assert analysis.report().callbacks_count == 5


def test_concern_is_not_a_model():
    assert not hasattr(Announcements, "__callbacks__")
