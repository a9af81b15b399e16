# Health reporter: read-only views over a finished audit.
# Created: 2026-10-18

from __future__ import annotations

import logging
from typing import Any

from pulsedoctor.audit.models import (
    AuditResult,
    DiagnosticItem,
    ModuleCategory,
    ModuleStatus,
    Severity,
    now_iso,
)

logger = logging.getLogger(__name__)

PLATFORM_NAME = "CamerPulse"
REPORT_VERSION = "1.0.0"


def _coerce(enum_cls, value):
    """Accept an enum member or its string value; None for unknown values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


class HealthReporter:
    """
    Projections over an AuditResult.

    Every method is safe to call before any run has finished: filters return
    ``[]``, the health percentage is ``None`` and the summary has zero counts.
    """

    def __init__(self, result: AuditResult | None = None):
        self.result = result

    @property
    def has_result(self) -> bool:
        return self.result is not None

    def _items(self) -> tuple[DiagnosticItem, ...]:
        if self.result is None:
            return ()
        return tuple(item.copy() for item in self.result.modules)

    def by_category(self, category: ModuleCategory | str) -> list[DiagnosticItem]:
        wanted = _coerce(ModuleCategory, category)
        return [item for item in self._items() if item.category == wanted]

    def by_status(self, status: ModuleStatus | str) -> list[DiagnosticItem]:
        wanted = _coerce(ModuleStatus, status)
        return [item for item in self._items() if item.status == wanted]

    def by_severity(self, severity: Severity | str) -> list[DiagnosticItem]:
        wanted = _coerce(Severity, severity)
        return [item for item in self._items() if item.severity == wanted]

    def with_issues(self) -> list[DiagnosticItem]:
        """Items that still carry findings."""
        return [item for item in self._items() if item.issues]

    def filter(
        self,
        category: ModuleCategory | str | None = None,
        status: ModuleStatus | str | None = None,
        severity: Severity | str | None = None,
    ) -> list[DiagnosticItem]:
        """Combine the single-field filters; ``None`` means "any"."""
        items = list(self._items())
        if category is not None:
            wanted_cat = _coerce(ModuleCategory, category)
            items = [i for i in items if i.category == wanted_cat]
        if status is not None:
            wanted_status = _coerce(ModuleStatus, status)
            items = [i for i in items if i.status == wanted_status]
        if severity is not None:
            wanted_sev = _coerce(Severity, severity)
            items = [i for i in items if i.severity == wanted_sev]
        return items

    def overall_health_percent(self) -> int | None:
        if self.result is None:
            return None
        return self.result.overall_health

    def headline(self) -> str:
        """One-line status, e.g. "45 of 45 checked, 40 healthy, 3 broken, 5 repaired"."""
        if self.result is None:
            return "No audit has been run yet"
        r = self.result
        return (
            f"{len(r.modules)} of {r.total_modules} checked, {r.working} healthy, "
            f"{r.broken} broken, {r.repaired} repaired"
        )

    def summary(self) -> dict[str, Any]:
        """Aggregate counters for dashboards."""
        if self.result is None:
            return {
                "has_result": False,
                "total_modules": 0,
                "checked": 0,
                "working": 0,
                "partially_working": 0,
                "broken": 0,
                "missing": 0,
                "incomplete": 0,
                "repaired": 0,
                "critical_issues": 0,
                "overall_health": None,
                "headline": self.headline(),
            }

        r = self.result
        return {
            "has_result": True,
            "total_modules": r.total_modules,
            "checked": len(r.modules),
            "working": r.working,
            "partially_working": len(self.by_status(ModuleStatus.PARTIALLY_WORKING)),
            "broken": r.broken,
            "missing": r.missing,
            "incomplete": len(self.by_status(ModuleStatus.INCOMPLETE)),
            "repaired": r.repaired,
            "critical_issues": len(self.by_severity(Severity.CRITICAL)),
            "overall_health": r.overall_health,
            "cancelled": r.cancelled,
            "duration_ms": r.duration_ms,
            "headline": self.headline(),
        }

    def export_report(self) -> dict[str, Any] | None:
        """Full report for download, stamped with generation metadata."""
        if self.result is None:
            return None
        report = self.result.to_dict()
        report["summary"] = self.summary()
        report["generated_at"] = now_iso()
        report["platform"] = PLATFORM_NAME
        report["version"] = REPORT_VERSION
        return report
