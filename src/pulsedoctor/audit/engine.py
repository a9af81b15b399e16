"""Audit engine: owns the latest audit result and live progress.

Created: 2026-10-18

The engine wraps the orchestrator for long-lived callers (the API server,
the watchdog). It keeps only the most recent AuditResult in memory; each
run fully replaces it. At most one run or single-module repair is in flight
at a time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from pulsedoctor.audit.chance import RandomChance
from pulsedoctor.audit.errors import (
    AuditInProgressError,
    NotRepairableError,
    RegistryError,
    UnknownModuleError,
)
from pulsedoctor.audit.models import (
    REPAIRABLE_STATUSES,
    AuditProgress,
    AuditResult,
    DiagnosticItem,
    ModuleStatus,
)
from pulsedoctor.audit.orchestrator import AuditOrchestrator, ProgressCallback
from pulsedoctor.audit.prober import ModuleProber
from pulsedoctor.audit.registry import load_registry
from pulsedoctor.audit.repair import RepairAttempter
from pulsedoctor.audit.reporter import HealthReporter
from pulsedoctor.config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_orchestrator(settings: Settings) -> AuditOrchestrator:
    """Wire registry, prober and repairer from settings.

    Prober and repairer share one seeded chance source so a fixed seed
    reproduces a whole run.

    Raises:
        RegistryError: If the configured module catalog cannot be loaded.
    """
    chance = RandomChance(settings.seed)
    prober = ModuleProber(
        settings.base_url,
        chance=chance,
        timeout=settings.probe_timeout,
        noise_probability=settings.noise_probability,
    )
    repairer = RepairAttempter(
        chance,
        partial_success_rate=settings.partial_repair_success_rate,
        broken_success_rate=settings.broken_repair_success_rate,
        delay=settings.repair_delay,
    )
    return AuditOrchestrator(load_registry(settings), prober, repairer)


def _count(items: tuple[DiagnosticItem, ...], status: ModuleStatus) -> int:
    return sum(1 for item in items if item.status == status)


class AuditEngine:
    """Runs audits on demand or periodically and keeps the latest result."""

    def __init__(
        self,
        orchestrator_factory: Callable[[], AuditOrchestrator] | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self._factory = orchestrator_factory or (lambda: build_orchestrator(self.settings))
        self._lock = asyncio.Lock()
        self._cancel: asyncio.Event | None = None
        self._watchdog_task: asyncio.Task | None = None
        self.watchdog_interval: float | None = None

        # Orchestrator that produced the latest result; reused for repairs
        self._orchestrator: AuditOrchestrator | None = None
        self._result: AuditResult | None = None
        self.progress: AuditProgress | None = None
        self.last_error: str | None = None
        self.run_count = 0

    # =========================================================================
    # Runs
    # =========================================================================

    @property
    def running(self) -> bool:
        return self._lock.locked()

    @property
    def result(self) -> AuditResult | None:
        """Latest result, as a copy callers may modify freely."""
        return self._result.copy() if self._result is not None else None

    @property
    def reporter(self) -> HealthReporter:
        return HealthReporter(self._result)

    async def run(self, on_progress: ProgressCallback | None = None) -> AuditResult:
        """Run one audit and store it as the latest result.

        Raises:
            AuditInProgressError: If another run is active.
            RegistryError: If the module catalog cannot be loaded.
        """
        if self._lock.locked():
            raise AuditInProgressError("An audit is already running")

        async with self._lock:
            self._cancel = asyncio.Event()
            self.progress = AuditProgress(0, 0, 0.0)
            self.last_error = None

            async def track(progress: AuditProgress) -> None:
                self.progress = progress
                if on_progress is not None:
                    result = on_progress(progress)
                    if asyncio.iscoroutine(result):
                        await result

            try:
                orchestrator = self._factory()
                result = await orchestrator.run(on_progress=track, cancel=self._cancel)
            except RegistryError as e:
                self.last_error = str(e)
                logger.error("Audit could not start: %s", e)
                raise
            except Exception as e:
                self.last_error = str(e)
                logger.exception("Audit failed")
                raise
            finally:
                self._cancel = None

            self._orchestrator = orchestrator
            self._result = result
            self.run_count += 1
            return self.result

    async def repair(self, item_id: str) -> AuditResult:
        """Re-attempt the repair of one module from the latest result.

        The item goes through ``fixing`` like an in-run repair. The stored
        result is replaced by one carrying the updated item and recomputed
        counters.

        Raises:
            AuditInProgressError: If a run or another repair is active.
            UnknownModuleError: If there is no result or no item with that id.
            NotRepairableError: If the item is not an auto-fixable broken or
                partially working module.
        """
        if self._lock.locked():
            raise AuditInProgressError("An audit is already running")

        async with self._lock:
            current = self._result
            if current is None or self._orchestrator is None:
                raise UnknownModuleError("No audit has been run yet")

            ids = [item.id for item in current.modules]
            if item_id not in ids:
                raise UnknownModuleError(f"No module {item_id!r} in the latest audit")
            index = ids.index(item_id)

            item = current.modules[index].copy()
            if item.status not in REPAIRABLE_STATUSES or not item.auto_fixable:
                raise NotRepairableError(
                    f"{item.name} is {item.status.value} and cannot be repaired automatically"
                )

            fixed = await self._orchestrator.repair_item(item)
            modules = current.modules[:index] + (item,) + current.modules[index + 1 :]
            self._result = replace(
                current,
                modules=modules,
                working=_count(modules, ModuleStatus.WORKING),
                broken=_count(modules, ModuleStatus.BROKEN),
                missing=_count(modules, ModuleStatus.MISSING),
                repaired=current.repaired + (1 if fixed else 0),
            )
            logger.info(
                "Repair of %s %s (%d%% health)",
                item.name,
                "succeeded" if fixed else "failed",
                self._result.overall_health,
            )
            return self.result

    def cancel(self) -> bool:
        """Ask the active run to stop at the next module boundary."""
        if self._cancel is None:
            return False
        self._cancel.set()
        logger.info("Audit cancellation requested")
        return True

    def status(self) -> dict[str, Any]:
        return {
            "running": self.running,
            "progress": self.progress.percent if self.progress else 0.0,
            "current_module": self.progress.current_module if self.progress else None,
            "completed": self.progress.completed if self.progress else 0,
            "total": self.progress.total if self.progress else 0,
            "has_result": self._result is not None,
            "run_count": self.run_count,
            "last_error": self.last_error,
            "watchdog_enabled": self.watchdog_enabled,
            "watchdog_interval": self.watchdog_interval,
        }

    # =========================================================================
    # Watchdog
    # =========================================================================

    @property
    def watchdog_enabled(self) -> bool:
        return self._watchdog_task is not None and not self._watchdog_task.done()

    def start_watchdog(self, interval: float | None = None) -> None:
        """Start periodic audits. Restarts the loop if it is already running."""
        if self.watchdog_enabled:
            self._watchdog_task.cancel()
        self.watchdog_interval = interval or self.settings.watchdog_interval
        self._watchdog_task = asyncio.create_task(self._watchdog_loop(self.watchdog_interval))
        logger.info("Audit watchdog started (every %gs)", self.watchdog_interval)

    async def stop_watchdog(self) -> None:
        task = self._watchdog_task
        self._watchdog_task = None
        self.watchdog_interval = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Audit watchdog stopped")

    async def _watchdog_loop(self, interval: float) -> None:
        while True:
            try:
                await self.run()
            except AuditInProgressError:
                logger.debug("Watchdog skipped a tick: audit already running")
            except Exception:
                # run() has logged and recorded it; try again next tick
                logger.debug("Watchdog tick failed", exc_info=True)
            await asyncio.sleep(interval)

    async def shutdown(self) -> None:
        self.cancel()
        await self.stop_watchdog()


# =========================================================================
# Factory Function
# =========================================================================

_engine_instance: AuditEngine | None = None


def get_audit_engine(settings: Settings | None = None) -> AuditEngine:
    """Get or create the audit engine singleton.

    ``settings`` only applies when the singleton is first created.
    """
    global _engine_instance
    if _engine_instance is None:
        _engine_instance = AuditEngine(settings=settings)
    return _engine_instance


async def shutdown_audit_engine() -> None:
    """Stop the singleton's watchdog and active run, if it was ever created."""
    if _engine_instance is not None:
        await _engine_instance.shutdown()


def reset_audit_engine() -> None:
    """Reset the engine singleton (for testing)."""
    global _engine_instance
    _engine_instance = None
