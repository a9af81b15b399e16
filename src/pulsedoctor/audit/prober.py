"""Module prober: decides the health of a single module.

Created: 2026-10-18

A probe runs in up to three steps:
1. Route existence check (HEAD request against the app's own routes)
2. Component-specific check, when one is registered for the component,
   bounded by the same timeout as the route probe
3. Residual noise: a small chance of flagging a minor performance issue

Failures never escape ``probe()``; they are recorded on the returned
DiagnosticItem so one bad module cannot stop an audit run.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from pulsedoctor.audit.chance import ChanceSource, RandomChance
from pulsedoctor.audit.checks import ComponentCheckRegistry, default_component_checks
from pulsedoctor.audit.models import (
    REPAIRABLE_STATUSES,
    DiagnosticItem,
    ModuleDescriptor,
    ModuleStatus,
    judge_severity,
    now_iso,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.0
DEFAULT_NOISE_PROBABILITY = 0.1

# 404-class answers mean "not there" rather than "not working"
_MISSING_CODES = frozenset({404, 410})


class ModuleProber:
    """Probes modules over HTTP and through registered component checks.

    Args:
        base_url: Origin the module routes are resolved against.
        client: Shared ``httpx.AsyncClient``. When omitted each route probe
            opens a short-lived client.
        checks: Component check registry (defaults to the built-in checks).
        chance: Randomness for noise and simulated checks.
        timeout: Seconds before a route probe counts as failed.
        noise_probability: Chance of flagging a healthy module as degraded.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8080",
        *,
        client: httpx.AsyncClient | None = None,
        checks: ComponentCheckRegistry | None = None,
        chance: ChanceSource | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        noise_probability: float = DEFAULT_NOISE_PROBABILITY,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client
        self.checks = checks if checks is not None else default_component_checks()
        self.chance = chance or RandomChance()
        self.timeout = timeout
        self.noise_probability = noise_probability

    def route_url(self, route: str) -> str:
        if not route.startswith("/"):
            route = "/" + route
        return f"{self.base_url}{route}"

    async def _head(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.head(url, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.head(url)

    async def probe(self, module: ModuleDescriptor) -> DiagnosticItem:
        """Probe one module and return its fully populated DiagnosticItem."""
        item = DiagnosticItem.pending(module)
        item.status = ModuleStatus.PROBING

        issues: list[str] = []
        status = ModuleStatus.WORKING
        exists = True
        fixable = True

        try:
            if module.route:
                url = self.route_url(module.route)
                try:
                    response = await self._head(url)
                    if response.status_code in _MISSING_CODES:
                        exists = False
                        status = ModuleStatus.MISSING
                        issues.append(f"Route {module.route} not found")
                    elif response.status_code >= 500:
                        status = ModuleStatus.BROKEN
                        issues.append(
                            f"Route {module.route} returned HTTP {response.status_code}"
                        )
                except httpx.TimeoutException:
                    status = ModuleStatus.BROKEN
                    issues.append(f"Route {module.route} timed out after {self.timeout:g}s")
                except httpx.HTTPError as e:
                    logger.debug("Route probe for %s failed: %s", url, e)
                    status = ModuleStatus.BROKEN
                    issues.append(f"Route {module.route} unreachable")

            if module.component_ref and exists:
                check = self.checks.get(module.component_ref)
                if check is not None:
                    try:
                        result = await asyncio.wait_for(
                            check(module, self.chance), timeout=self.timeout
                        )
                    except TimeoutError:
                        status = ModuleStatus.BROKEN
                        issues.append(
                            f"Component {module.component_ref} timed out after {self.timeout:g}s"
                        )
                    except Exception as e:
                        status = ModuleStatus.BROKEN
                        issues.append(f"Component {module.component_ref} failed to load: {e}")
                    else:
                        if not result.healthy:
                            status = result.status
                            fixable = result.auto_fixable
                            issues.extend(result.issues)

            if status == ModuleStatus.WORKING and self.chance.chance(self.noise_probability):
                status = ModuleStatus.PARTIALLY_WORKING
                issues.append("Minor performance issues detected")

        except Exception as e:
            logger.warning("Probe of %s failed unexpectedly", module.name, exc_info=True)
            status = ModuleStatus.BROKEN
            issues.append(f"System error: {e}")

        item.status = status
        item.exists = exists
        item.issues = issues
        item.severity = judge_severity(status, module.priority)
        item.auto_fixable = status in REPAIRABLE_STATUSES and fixable
        item.description = issues[0] if issues else f"{module.name} is working"
        item.last_checked = now_iso()
        return item
