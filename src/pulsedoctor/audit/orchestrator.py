"""Audit orchestrator: one full pass over the module registry.

Created: 2026-10-18

Per-module state machine within a run:

    pending -> probing -> working | partially_working | broken | missing | incomplete
    broken | partially_working -> fixing -> working | <unchanged>   (auto-fixable only)

Modules are processed strictly one at a time so observers get a progress
update between modules. The orchestrator is the only writer of the run's
counters and items; nothing else touches them until the frozen AuditResult
is returned.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from pulsedoctor.audit.errors import RegistryError
from pulsedoctor.audit.models import (
    REPAIRABLE_STATUSES,
    AuditProgress,
    AuditResult,
    DiagnosticItem,
    ModuleDescriptor,
    ModuleStatus,
    Severity,
    judge_severity,
    now_iso,
)
from pulsedoctor.audit.prober import ModuleProber
from pulsedoctor.audit.registry import ModuleRegistry
from pulsedoctor.audit.repair import RepairAttempter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[AuditProgress], Awaitable[None] | None]


class AuditOrchestrator:
    """Runs audits over a registry with a prober and a repair attempter.

    Usage:
        orchestrator = AuditOrchestrator(ModuleRegistry.default(), ModuleProber(), RepairAttempter())
        result = await orchestrator.run(on_progress=lambda p: print(p.percent))
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        prober: ModuleProber,
        repairer: RepairAttempter,
    ):
        self.registry = registry
        self.prober = prober
        self.repairer = repairer

    async def run(
        self,
        on_progress: ProgressCallback | None = None,
        cancel: asyncio.Event | None = None,
    ) -> AuditResult:
        """Audit every registered module and return the frozen result.

        Args:
            on_progress: Called (sync or async) after each module finishes.
            cancel: When set, no further modules are scheduled; the result
                then holds only the modules finished so far and
                ``cancelled=True``.

        Raises:
            RegistryError: If the module list cannot be obtained.
        """
        started = datetime.now(UTC)

        try:
            modules = self.registry.list_modules()
        except RegistryError:
            raise
        except Exception as e:
            raise RegistryError(f"Could not enumerate modules: {e}") from e

        total = len(modules)
        items = [DiagnosticItem.pending(module) for module in modules]
        finished: list[DiagnosticItem] = []
        working = broken = missing = repaired = 0
        cancelled = False

        logger.info("Audit started: %d modules", total)

        if total == 0:
            await self._report(on_progress, AuditProgress(0, 0, 100.0))

        for index, module in enumerate(modules):
            if cancel is not None and cancel.is_set():
                cancelled = True
                logger.info("Audit cancelled after %d/%d modules", index, total)
                break

            item, was_repaired = await self._audit_module(module, items[index])
            if was_repaired:
                repaired += 1

            if item.status == ModuleStatus.WORKING:
                working += 1
            elif item.status == ModuleStatus.BROKEN:
                broken += 1
            elif item.status == ModuleStatus.MISSING:
                missing += 1

            finished.append(item)
            completed = index + 1
            await self._report(
                on_progress,
                AuditProgress(completed, total, completed / total * 100, module.name),
            )

        ended = datetime.now(UTC)
        result = AuditResult(
            total_modules=total,
            working=working,
            broken=broken,
            repaired=repaired,
            missing=missing,
            start_time=started.isoformat(),
            end_time=ended.isoformat(),
            duration_ms=int((ended - started).total_seconds() * 1000),
            modules=tuple(finished),
            cancelled=cancelled,
        )
        logger.info(
            "Audit complete: %d/%d working, %d broken, %d missing, %d repaired (%d%% health)",
            working,
            total,
            broken,
            missing,
            repaired,
            result.overall_health,
        )
        return result

    async def _audit_module(
        self, module: ModuleDescriptor, item: DiagnosticItem
    ) -> tuple[DiagnosticItem, bool]:
        item.status = ModuleStatus.PROBING
        try:
            item = await self.prober.probe(module)
        except Exception as e:
            logger.warning("Prober raised for %s", module.name, exc_info=True)
            item.status = ModuleStatus.BROKEN
            item.issues.append(f"System error: {e}")
            item.severity = judge_severity(item.status, module.priority)
            item.auto_fixable = True
            item.description = item.issues[0]
            item.last_checked = now_iso()

        if item.status in REPAIRABLE_STATUSES and item.auto_fixable:
            return item, await self.repair_item(item)
        return item, False

    async def repair_item(self, item: DiagnosticItem) -> bool:
        """Run one repair attempt on ``item`` in place; True when it now works."""
        starting = item.status
        item.status = ModuleStatus.FIXING
        item.repair_attempted = True

        try:
            repaired = await self.repairer.attempt_repair(item, starting)
        except Exception as e:
            logger.warning("Repair of %s raised", item.name, exc_info=True)
            item.issues.append(f"Repair failed: {e}")
            repaired = False

        item.repair_successful = repaired
        if repaired:
            item.status = ModuleStatus.WORKING
            item.issues = []
            item.severity = Severity.INFO
            item.description = f"{item.name} repaired automatically"
        else:
            item.status = starting
        return repaired

    async def _report(self, on_progress: ProgressCallback | None, progress: AuditProgress) -> None:
        if on_progress is None:
            return
        try:
            result = on_progress(progress)
            if asyncio.iscoroutine(result):
                await result
        except Exception:
            logger.warning("Progress callback failed", exc_info=True)
