# Tests for audit/models.py
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
    health_percent,
    judge_severity,
    slugify,
)


class TestSlugify:
    def test_spaces_and_case(self):
        assert slugify("Admin Panel") == "admin-panel"

    def test_punctuation(self):
        assert slugify("Pan-Africa Admin") == "pan-africa-admin"
        assert slugify("  Cross/Country  Analytics! ") == "cross-country-analytics"


class TestHealthPercent:
    def test_all_healthy(self):
        assert health_percent(3, 3) == 100

    def test_empty_is_healthy(self):
        assert health_percent(0, 0) == 100

    def test_rounds_half_up(self):
        # 1/8 = 12.5% -> 13, where banker's rounding would give 12
        assert health_percent(1, 8) == 13

    def test_clamped(self):
        assert health_percent(5, 3) == 100
        assert health_percent(0, 3) == 0


class TestJudgeSeverity:
    def test_working_is_info(self):
        assert judge_severity(ModuleStatus.WORKING, ModulePriority.CRITICAL) == Severity.INFO

    def test_partial_is_warning(self):
        assert (
            judge_severity(ModuleStatus.PARTIALLY_WORKING, ModulePriority.CRITICAL)
            == Severity.WARNING
        )

    @pytest.mark.parametrize("priority", [ModulePriority.CRITICAL, ModulePriority.HIGH])
    def test_broken_important_module_is_critical(self, priority):
        assert judge_severity(ModuleStatus.BROKEN, priority) == Severity.CRITICAL
        assert judge_severity(ModuleStatus.MISSING, priority) == Severity.CRITICAL

    def test_broken_minor_module_is_warning(self):
        assert judge_severity(ModuleStatus.BROKEN, ModulePriority.LOW) == Severity.WARNING


class TestModuleDescriptor:
    def test_module_id(self):
        module = ModuleDescriptor(name="News Feed", route="/news")
        assert module.module_id == "news-feed"

    def test_from_dict_accepts_module_alias(self):
        module = ModuleDescriptor.from_dict(
            {"module": "Polls", "route": "/polls", "priority": "medium", "category": "page"}
        )
        assert module.name == "Polls"
        assert module.category == ModuleCategory.PAGE
        assert module.component_ref is None

    def test_from_dict_rejects_missing_name(self):
        with pytest.raises(ValueError):
            ModuleDescriptor.from_dict({"route": "/x"})

    def test_from_dict_rejects_bad_priority(self):
        with pytest.raises(ValueError):
            ModuleDescriptor.from_dict({"name": "X", "priority": "urgent"})


class TestDiagnosticItem:
    def test_pending_copies_descriptor(self):
        module = ModuleDescriptor(
            name="Admin Panel",
            route="/admin",
            component_ref="Admin",
            priority=ModulePriority.CRITICAL,
            category=ModuleCategory.PAGE,
        )
        item = DiagnosticItem.pending(module)
        assert item.id == "admin-panel"
        assert item.status == ModuleStatus.PENDING
        assert item.location == "route /admin, component Admin"
        assert item.repair_attempted is None

    def test_to_dict_omits_repair_fields_when_not_attempted(self):
        item = DiagnosticItem.pending(ModuleDescriptor(name="Polls"))
        data = item.to_dict()
        assert "repair_attempted" not in data
        assert "repair_successful" not in data

    def test_to_dict_includes_repair_fields(self):
        item = DiagnosticItem.pending(ModuleDescriptor(name="Polls"))
        item.repair_attempted = True
        item.repair_successful = False
        data = item.to_dict()
        assert data["repair_attempted"] is True
        assert data["repair_successful"] is False

    def test_from_dict(self):
        item = DiagnosticItem.from_dict(
            {
                "id": "polls",
                "name": "Polls",
                "category": "page",
                "priority": "medium",
                "status": "broken",
                "severity": "warning",
                "issues": ["Route /polls unreachable"],
            }
        )
        assert item.status == ModuleStatus.BROKEN
        assert item.issues == ["Route /polls unreachable"]


class TestAuditResult:
    def test_overall_health(self):
        result = AuditResult(
            total_modules=4,
            working=3,
            broken=1,
            repaired=0,
            missing=0,
            start_time="",
            end_time="",
            duration_ms=0,
        )
        assert result.overall_health == 75

    def test_frozen(self):
        result = AuditResult(0, 0, 0, 0, 0, "", "", 0)
        with pytest.raises(AttributeError):
            result.working = 1

    def test_from_dict(self):
        result = AuditResult.from_dict(
            {
                "total_modules": 1,
                "working": 1,
                "modules": [
                    {"id": "a", "name": "A", "category": "page", "status": "working"},
                ],
            }
        )
        assert result.modules[0].id == "a"
        assert result.overall_health == 100
