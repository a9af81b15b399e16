# Audit API schemas.
# Created: 2026-10-18

from __future__ import annotations

from pydantic import BaseModel, Field


class ModuleDescriptorOut(BaseModel):
    """A registry entry."""

    id: str
    name: str
    route: str | None = None
    component: str | None = None
    priority: str
    category: str


class DiagnosticItemOut(BaseModel):
    """Findings for one module."""

    id: str
    name: str
    route: str | None = None
    component: str | None = None
    category: str
    priority: str
    severity: str
    description: str = ""
    location: str = ""
    status: str
    exists: bool = True
    auto_fixable: bool = False
    issues: list[str] = []
    last_checked: str | None = None
    repair_attempted: bool | None = None
    repair_successful: bool | None = None


class AuditResultOut(BaseModel):
    """A completed audit run."""

    total_modules: int
    working: int
    broken: int
    repaired: int
    missing: int
    overall_health: int
    start_time: str
    end_time: str
    duration_ms: int
    cancelled: bool = False
    modules: list[DiagnosticItemOut] = []


class AuditStatus(BaseModel):
    """Live state of the audit engine."""

    running: bool = False
    progress: float = 0.0
    current_module: str | None = None
    completed: int = 0
    total: int = 0
    has_result: bool = False
    run_count: int = 0
    last_error: str | None = None
    watchdog_enabled: bool = False
    watchdog_interval: float | None = None


class AuditSummary(BaseModel):
    """Aggregate counters over the latest result."""

    has_result: bool = False
    total_modules: int = 0
    checked: int = 0
    working: int = 0
    partially_working: int = 0
    broken: int = 0
    missing: int = 0
    incomplete: int = 0
    repaired: int = 0
    critical_issues: int = 0
    overall_health: int | None = None
    cancelled: bool = False
    duration_ms: int = 0
    headline: str = ""


class WatchdogRequest(BaseModel):
    """Enable or disable periodic audits."""

    enabled: bool
    interval: float | None = Field(default=None, gt=0)
