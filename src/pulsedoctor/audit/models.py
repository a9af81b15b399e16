"""Audit data models.

Created: 2026-10-18

These models define the core data structures for:
- Module descriptors (static catalog entries)
- Diagnostic items (one per module probed in a run)
- Audit results (one per completed scan)
- Progress snapshots (reported after each module)

Design notes:
- Dataclasses with to_dict/from_dict for JSON serialization
- Timestamps are ISO 8601 strings
- Status enums are str-valued so they serialize as plain strings
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

# ============================================================================
# Enums
# ============================================================================


class ModulePriority(str, Enum):
    """Static importance of a module."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ModuleCategory(str, Enum):
    """What kind of application unit a module is."""

    PAGE = "page"
    COMPONENT = "component"
    FEATURE = "feature"
    INTEGRATION = "integration"


class ModuleStatus(str, Enum):
    """Per-module state during and after an audit run."""

    PENDING = "pending"  # Not yet looked at
    PROBING = "probing"  # Probe in flight
    WORKING = "working"
    PARTIALLY_WORKING = "partially_working"
    BROKEN = "broken"
    MISSING = "missing"  # Route answered 404
    INCOMPLETE = "incomplete"
    FIXING = "fixing"  # Repair in flight


class Severity(str, Enum):
    """Probe-time judgment of how bad a finding is."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


TERMINAL_STATUSES = frozenset(
    {
        ModuleStatus.WORKING,
        ModuleStatus.PARTIALLY_WORKING,
        ModuleStatus.BROKEN,
        ModuleStatus.MISSING,
        ModuleStatus.INCOMPLETE,
    }
)

REPAIRABLE_STATUSES = frozenset({ModuleStatus.BROKEN, ModuleStatus.PARTIALLY_WORKING})


# ============================================================================
# Helper Functions
# ============================================================================

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Turn a module name into a stable identifier ("Admin Panel" -> "admin-panel")."""
    return _SLUG_RE.sub("-", name.lower()).strip("-")


def now_iso() -> str:
    """Get current UTC time as ISO 8601 string."""
    return datetime.now(UTC).isoformat()


def health_percent(healthy: int, total: int) -> int:
    """Share of healthy modules, 0-100, rounded half up. Empty means healthy."""
    if total <= 0:
        return 100
    return max(0, min(100, math.floor(healthy / total * 100 + 0.5)))


def judge_severity(status: ModuleStatus, priority: ModulePriority) -> Severity:
    """Decide severity from a probe outcome and the module's static priority."""
    if status == ModuleStatus.WORKING:
        return Severity.INFO
    if status == ModuleStatus.PARTIALLY_WORKING:
        return Severity.WARNING
    if priority in (ModulePriority.CRITICAL, ModulePriority.HIGH):
        return Severity.CRITICAL
    return Severity.WARNING


# ============================================================================
# Data Models
# ============================================================================


@dataclass(frozen=True)
class ModuleDescriptor:
    """
    A named unit of the application subject to health probing.

    Attributes:
        name: Human-readable identifier, unique within a registry
        route: URL path if the module is a navigable page
        component_ref: Logical name of the implementing unit
        priority: Static importance
        category: page, component, feature or integration
    """

    name: str
    route: str | None = None
    component_ref: str | None = None
    priority: ModulePriority = ModulePriority.MEDIUM
    category: ModuleCategory = ModuleCategory.COMPONENT

    @property
    def module_id(self) -> str:
        return slugify(self.name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.module_id,
            "name": self.name,
            "route": self.route,
            "component": self.component_ref,
            "priority": self.priority.value,
            "category": self.category.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleDescriptor:
        """Create from dictionary. Accepts "module" as an alias for "name"."""
        if not isinstance(data, dict):
            raise TypeError(f"module entry must be an object, got {type(data).__name__}")
        name = data.get("name") or data.get("module")
        if not name:
            raise ValueError("module entry has no name")
        if not isinstance(name, str):
            raise TypeError(f"module name must be a string, got {name!r}")
        route = data.get("route") or None
        component_ref = data.get("component") or data.get("component_ref") or None
        for key, value in (("route", route), ("component", component_ref)):
            if value is not None and not isinstance(value, str):
                raise TypeError(f"module {key} must be a string, got {value!r}")
        return cls(
            name=name,
            route=route,
            component_ref=component_ref,
            priority=ModulePriority(data.get("priority", "medium")),
            category=ModuleCategory(data.get("category", "component")),
        )


@dataclass
class DiagnosticItem:
    """
    Findings for one module in one audit run.

    Attributes:
        id: Stable identifier derived from the module name
        name: Module name
        route: Route that was probed, if any
        component_ref: Component that was checked, if any
        category: Module category
        priority: Module priority (static)
        severity: Probe-time judgment, distinct from priority
        description: One-line summary of the finding
        location: Where the finding applies (route and/or component)
        status: Current state machine value
        exists: False when the route answered 404
        auto_fixable: Whether a repair may be attempted, fixed at detection
        issues: Ordered free-text findings
        last_checked: When the probe finished
        repair_attempted: Set only when a repair was tried
        repair_successful: Set only when a repair was tried
    """

    id: str
    name: str
    category: ModuleCategory
    priority: ModulePriority
    route: str | None = None
    component_ref: str | None = None
    severity: Severity = Severity.INFO
    description: str = ""
    location: str = ""
    status: ModuleStatus = ModuleStatus.PENDING
    exists: bool = True
    auto_fixable: bool = False
    issues: list[str] = field(default_factory=list)
    last_checked: str | None = None
    repair_attempted: bool | None = None
    repair_successful: bool | None = None

    @classmethod
    def pending(cls, module: ModuleDescriptor) -> DiagnosticItem:
        """Fresh item for a module that has not been probed yet."""
        return cls(
            id=module.module_id,
            name=module.name,
            category=module.category,
            priority=module.priority,
            route=module.route,
            component_ref=module.component_ref,
            location=describe_location(module),
        )

    def copy(self) -> DiagnosticItem:
        """Detached copy; changing it leaves the original untouched."""
        return replace(self, issues=list(self.issues))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "route": self.route,
            "component": self.component_ref,
            "category": self.category.value,
            "priority": self.priority.value,
            "severity": self.severity.value,
            "description": self.description,
            "location": self.location,
            "status": self.status.value,
            "exists": self.exists,
            "auto_fixable": self.auto_fixable,
            "issues": list(self.issues),
            "last_checked": self.last_checked,
        }
        if self.repair_attempted is not None:
            data["repair_attempted"] = self.repair_attempted
            data["repair_successful"] = self.repair_successful
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiagnosticItem:
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            route=data.get("route"),
            component_ref=data.get("component"),
            category=ModuleCategory(data.get("category", "component")),
            priority=ModulePriority(data.get("priority", "medium")),
            severity=Severity(data.get("severity", "info")),
            description=data.get("description", ""),
            location=data.get("location", ""),
            status=ModuleStatus(data.get("status", "pending")),
            exists=data.get("exists", True),
            auto_fixable=data.get("auto_fixable", False),
            issues=list(data.get("issues", [])),
            last_checked=data.get("last_checked"),
            repair_attempted=data.get("repair_attempted"),
            repair_successful=data.get("repair_successful"),
        )


def describe_location(module: ModuleDescriptor) -> str:
    parts = []
    if module.route:
        parts.append(f"route {module.route}")
    if module.component_ref:
        parts.append(f"component {module.component_ref}")
    return ", ".join(parts) or module.name


@dataclass(frozen=True)
class AuditResult:
    """
    Outcome of one audit run.

    Built by the orchestrator once the run ends and never mutated afterwards.
    The engine and reporter hand out ``copy()``-detached items, so callers
    cannot reach the stored result through them.
    ``working + broken + missing`` can be lower than ``total_modules``:
    partially working and incomplete modules are not in the headline buckets.
    """

    total_modules: int
    working: int
    broken: int
    repaired: int
    missing: int
    start_time: str
    end_time: str
    duration_ms: int
    modules: tuple[DiagnosticItem, ...] = ()
    cancelled: bool = False

    @property
    def overall_health(self) -> int:
        return health_percent(self.working, self.total_modules)

    def copy(self) -> AuditResult:
        """Copy with detached items, for handing out to callers."""
        return replace(self, modules=tuple(item.copy() for item in self.modules))

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_modules": self.total_modules,
            "working": self.working,
            "broken": self.broken,
            "repaired": self.repaired,
            "missing": self.missing,
            "overall_health": self.overall_health,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_ms": self.duration_ms,
            "cancelled": self.cancelled,
            "modules": [item.to_dict() for item in self.modules],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditResult:
        return cls(
            total_modules=data["total_modules"],
            working=data.get("working", 0),
            broken=data.get("broken", 0),
            repaired=data.get("repaired", 0),
            missing=data.get("missing", 0),
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            duration_ms=data.get("duration_ms", 0),
            modules=tuple(DiagnosticItem.from_dict(m) for m in data.get("modules", [])),
            cancelled=data.get("cancelled", False),
        )


@dataclass(frozen=True)
class AuditProgress:
    """Snapshot reported to observers after each module finishes."""

    completed: int
    total: int
    percent: float
    current_module: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "completed": self.completed,
            "total": self.total,
            "percent": self.percent,
            "current_module": self.current_module,
        }
