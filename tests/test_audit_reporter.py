# Tests for audit/reporter.py
# Created: 2026-10-18

import pytest

from pulsedoctor.audit.models import (
    AuditResult,
    DiagnosticItem,
    ModuleCategory,
    ModuleDescriptor,
    ModulePriority,
    ModuleStatus,
    Severity,
)
from pulsedoctor.audit.reporter import HealthReporter


def _item(name, category, status, severity, issues=()):
    item = DiagnosticItem.pending(
        ModuleDescriptor(name=name, category=category, priority=ModulePriority.HIGH)
    )
    item.status = status
    item.severity = severity
    item.issues = list(issues)
    return item


@pytest.fixture
def result():
    items = (
        _item("Homepage", ModuleCategory.PAGE, ModuleStatus.WORKING, Severity.INFO),
        _item(
            "Polls",
            ModuleCategory.PAGE,
            ModuleStatus.MISSING,
            Severity.CRITICAL,
            ["Route /polls not found"],
        ),
        _item(
            "Alert Bot",
            ModuleCategory.FEATURE,
            ModuleStatus.BROKEN,
            Severity.CRITICAL,
            ["Bot API connection failed"],
        ),
        _item(
            "Cache",
            ModuleCategory.FEATURE,
            ModuleStatus.PARTIALLY_WORKING,
            Severity.WARNING,
            ["Cache invalidation issues"],
        ),
        _item("Header", ModuleCategory.COMPONENT, ModuleStatus.WORKING, Severity.INFO),
    )
    return AuditResult(
        total_modules=5,
        working=2,
        broken=1,
        repaired=1,
        missing=1,
        start_time="2026-10-18T10:00:00+00:00",
        end_time="2026-10-18T10:00:01+00:00",
        duration_ms=1000,
        modules=items,
    )


class TestFilters:
    def test_by_category_preserves_order(self, result):
        reporter = HealthReporter(result)
        assert [i.name for i in reporter.by_category(ModuleCategory.PAGE)] == [
            "Homepage",
            "Polls",
        ]
        assert [i.name for i in reporter.by_category("feature")] == ["Alert Bot", "Cache"]

    def test_by_status(self, result):
        reporter = HealthReporter(result)
        assert [i.name for i in reporter.by_status("working")] == ["Homepage", "Header"]
        assert [i.name for i in reporter.by_status(ModuleStatus.MISSING)] == ["Polls"]

    def test_by_status_is_repeatable(self, result):
        reporter = HealthReporter(result)
        assert reporter.by_status("working") == reporter.by_status("working")

    def test_by_severity(self, result):
        reporter = HealthReporter(result)
        assert [i.name for i in reporter.by_severity(Severity.CRITICAL)] == ["Polls", "Alert Bot"]

    def test_unknown_filter_value_is_empty(self, result):
        reporter = HealthReporter(result)
        assert reporter.by_status("exploded") == []
        assert reporter.by_category("widget") == []

    def test_with_issues(self, result):
        names = [i.name for i in HealthReporter(result).with_issues()]
        assert names == ["Polls", "Alert Bot", "Cache"]

    def test_combined_filter(self, result):
        reporter = HealthReporter(result)
        items = reporter.filter(category="feature", severity="critical")
        assert [i.name for i in items] == ["Alert Bot"]
        assert len(reporter.filter()) == 5


class TestAggregates:
    def test_overall_health(self, result):
        assert HealthReporter(result).overall_health_percent() == 40

    def test_summary(self, result):
        summary = HealthReporter(result).summary()
        assert summary["has_result"] is True
        assert summary["checked"] == 5
        assert summary["working"] == 2
        assert summary["partially_working"] == 1
        assert summary["critical_issues"] == 2
        assert summary["repaired"] == 1
        assert summary["overall_health"] == 40
        assert summary["headline"] == "5 of 5 checked, 2 healthy, 1 broken, 1 repaired"

    def test_export_report(self, result):
        report = HealthReporter(result).export_report()
        assert report["platform"] == "CamerPulse"
        assert report["version"] == "1.0.0"
        assert "generated_at" in report
        assert len(report["modules"]) == 5
        assert report["summary"]["overall_health"] == 40


class TestBeforeAnyRun:
    def test_views_are_empty(self):
        reporter = HealthReporter()
        assert reporter.has_result is False
        assert reporter.by_category("page") == []
        assert reporter.by_status("working") == []
        assert reporter.by_severity("critical") == []
        assert reporter.with_issues() == []
        assert reporter.overall_health_percent() is None
        assert reporter.export_report() is None

    def test_summary_is_empty(self):
        summary = HealthReporter(None).summary()
        assert summary["has_result"] is False
        assert summary["overall_health"] is None
        assert summary["headline"] == "No audit has been run yet"
