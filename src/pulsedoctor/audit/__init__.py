"""Self-diagnostic audit engine.

Created: 2026-10-18

Walks a catalog of application modules (pages, components, features,
integrations), probes each one, attempts automatic repair of unhealthy ones
and reports aggregate health. Features:

- Static module registry (built-in catalog or JSON file)
- Route probes over HTTP plus pluggable per-component checks
- Simulated repairs with injectable, seedable randomness
- Sequential runs with progress reporting and cancellation
- Read-only reporting views (by category, status, severity)
- On-demand repair of a single module from the latest result

Usage:
    from pulsedoctor.audit import get_audit_engine

    engine = get_audit_engine()
    result = await engine.run()
    print(engine.reporter.headline())
"""

from pulsedoctor.audit.chance import ChanceSource, FixedChance, RandomChance
from pulsedoctor.audit.checks import (
    ComponentCheckRegistry,
    ComponentCheckResult,
    default_component_checks,
)
from pulsedoctor.audit.engine import (
    AuditEngine,
    build_orchestrator,
    get_audit_engine,
    reset_audit_engine,
    shutdown_audit_engine,
)
from pulsedoctor.audit.errors import (
    AuditError,
    AuditInProgressError,
    NotRepairableError,
    RegistryError,
    UnknownModuleError,
)
from pulsedoctor.audit.models import (
    AuditProgress,
    AuditResult,
    DiagnosticItem,
    ModuleCategory,
    ModuleDescriptor,
    ModulePriority,
    ModuleStatus,
    Severity,
)
from pulsedoctor.audit.orchestrator import AuditOrchestrator
from pulsedoctor.audit.prober import ModuleProber
from pulsedoctor.audit.registry import ModuleRegistry, load_registry
from pulsedoctor.audit.repair import RepairAttempter
from pulsedoctor.audit.reporter import HealthReporter

__all__ = [
    # Models
    "ModuleDescriptor",
    "ModulePriority",
    "ModuleCategory",
    "ModuleStatus",
    "Severity",
    "DiagnosticItem",
    "AuditResult",
    "AuditProgress",
    # Errors
    "AuditError",
    "RegistryError",
    "AuditInProgressError",
    "UnknownModuleError",
    "NotRepairableError",
    # Randomness
    "ChanceSource",
    "RandomChance",
    "FixedChance",
    # Components
    "ModuleRegistry",
    "load_registry",
    "ComponentCheckRegistry",
    "ComponentCheckResult",
    "default_component_checks",
    "ModuleProber",
    "RepairAttempter",
    "AuditOrchestrator",
    "HealthReporter",
    # Engine
    "AuditEngine",
    "build_orchestrator",
    "get_audit_engine",
    "shutdown_audit_engine",
    "reset_audit_engine",
]
