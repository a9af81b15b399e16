# Component health checks, looked up by component name.
# Created: 2026-10-18
#
# A check is an async callable taking the module descriptor and the chance
# source, returning a ComponentCheckResult. Components without a registered
# check are assumed healthy unless their route probe failed.

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from pulsedoctor.audit.chance import ChanceSource
from pulsedoctor.audit.models import ModuleDescriptor, ModuleStatus

logger = logging.getLogger(__name__)


@dataclass
class ComponentCheckResult:
    """Outcome of a component-specific check.

    ``status`` is applied only when ``healthy`` is False. Degraded but usable
    components report PARTIALLY_WORKING; hard failures keep the BROKEN default.
    """

    healthy: bool = True
    issues: list[str] = field(default_factory=list)
    status: ModuleStatus = ModuleStatus.BROKEN
    auto_fixable: bool = True


ComponentCheck = Callable[[ModuleDescriptor, ChanceSource], Awaitable[ComponentCheckResult]]


class ComponentCheckRegistry:
    """
    Named lookup of component health checks.

    Usage:
        checks = ComponentCheckRegistry()
        checks.register("CivicAlertBot", check_alert_bot)

        check = checks.get(module.component_ref)
        if check is not None:
            result = await check(module, chance)
    """

    def __init__(self, checks: dict[str, ComponentCheck] | None = None):
        self._checks: dict[str, ComponentCheck] = dict(checks or {})

    def register(self, component: str, check: ComponentCheck) -> None:
        """Register (or replace) the check for a component."""
        self._checks[component] = check
        logger.debug("Registered component check: %s", component)

    def unregister(self, component: str) -> None:
        self._checks.pop(component, None)

    def get(self, component: str) -> ComponentCheck | None:
        return self._checks.get(component)

    def has(self, component: str) -> bool:
        return component in self._checks

    @property
    def components(self) -> list[str]:
        return sorted(self._checks)


# ---------------------------------------------------------------------------
# Built-in checks
# ---------------------------------------------------------------------------

ALERT_BOT_FAILURE_RATE = 0.2
CACHE_FAILURE_RATE = 0.1


async def check_alert_bot(module: ModuleDescriptor, chance: ChanceSource) -> ComponentCheckResult:
    """Ping the alert bot's API."""
    await asyncio.sleep(0)
    if chance.chance(ALERT_BOT_FAILURE_RATE):
        return ComponentCheckResult(healthy=False, issues=["Bot API connection failed"])
    return ComponentCheckResult()


async def check_cache(module: ModuleDescriptor, chance: ChanceSource) -> ComponentCheckResult:
    """Verify cache invalidation is keeping up."""
    await asyncio.sleep(0)
    if chance.chance(CACHE_FAILURE_RATE):
        return ComponentCheckResult(
            healthy=False,
            issues=["Cache invalidation issues"],
            status=ModuleStatus.PARTIALLY_WORKING,
        )
    return ComponentCheckResult()


def default_component_checks() -> ComponentCheckRegistry:
    """Registry preloaded with the built-in checks."""
    return ComponentCheckRegistry(
        {
            "CivicAlertBot": check_alert_bot,
            "CacheManagementDashboard": check_cache,
        }
    )
