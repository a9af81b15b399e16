# Repair attempter: simulated automatic remediation of unhealthy modules.
# Created: 2026-10-18
#
# Outcomes are drawn from the injected ChanceSource; nothing on disk or on the
# network is touched. Any real remediation added here must stay idempotent,
# which the in-progress guard below already enforces per item.

from __future__ import annotations

import asyncio
import logging

from pulsedoctor.audit.chance import ChanceSource, RandomChance
from pulsedoctor.audit.models import REPAIRABLE_STATUSES, DiagnosticItem, ModuleStatus

logger = logging.getLogger(__name__)

PARTIAL_REPAIR_SUCCESS_RATE = 0.9
BROKEN_REPAIR_SUCCESS_RATE = 0.7


class RepairAttempter:
    """Attempts one repair per call and reports whether it worked.

    The item is never mutated here; the orchestrator applies the outcome.
    """

    def __init__(
        self,
        chance: ChanceSource | None = None,
        *,
        partial_success_rate: float = PARTIAL_REPAIR_SUCCESS_RATE,
        broken_success_rate: float = BROKEN_REPAIR_SUCCESS_RATE,
        delay: float = 0.0,
    ):
        self.chance = chance or RandomChance()
        self.partial_success_rate = partial_success_rate
        self.broken_success_rate = broken_success_rate
        self.delay = delay
        self._in_progress: set[str] = set()

    def success_rate(self, status: ModuleStatus) -> float:
        if status == ModuleStatus.PARTIALLY_WORKING:
            return self.partial_success_rate
        if status == ModuleStatus.BROKEN:
            return self.broken_success_rate
        return 0.0

    def is_repairing(self, item_id: str) -> bool:
        return item_id in self._in_progress

    async def attempt_repair(
        self, item: DiagnosticItem, from_status: ModuleStatus | None = None
    ) -> bool:
        """Try to repair ``item``.

        Args:
            item: The unhealthy diagnostic item.
            from_status: Status to judge the repair by. Defaults to
                ``item.status``; the orchestrator passes the pre-repair status
                because it has already moved the item to ``fixing``.

        Returns:
            True if the repair succeeded. False for failed repairs, for items
            that are not broken or partially working, and for items that
            already have a repair in flight.
        """
        status = from_status or item.status
        if status not in REPAIRABLE_STATUSES:
            logger.debug("Skipping repair of %s: status %s", item.id, status.value)
            return False

        if item.id in self._in_progress:
            logger.warning("Repair of %s already in progress, not starting another", item.id)
            return False

        self._in_progress.add(item.id)
        try:
            if self.delay > 0:
                await asyncio.sleep(self.delay)
            repaired = self.chance.chance(self.success_rate(status))
        finally:
            self._in_progress.discard(item.id)

        logger.info(
            "Repair of %s (%s): %s", item.name, status.value, "succeeded" if repaired else "failed"
        )
        return repaired
