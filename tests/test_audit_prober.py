# Tests for audit/prober.py and audit/checks.py
# Created: 2026-10-18

import asyncio

import httpx
import pytest

from pulsedoctor.audit.chance import FixedChance
from pulsedoctor.audit.checks import (
    ComponentCheckRegistry,
    ComponentCheckResult,
    check_alert_bot,
    check_cache,
    default_component_checks,
)
from pulsedoctor.audit.models import (
    ModuleCategory,
    ModuleDescriptor,
    ModulePriority,
    ModuleStatus,
    Severity,
)
from pulsedoctor.audit.prober import ModuleProber

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200)


def _prober(handler=_ok, checks=None, chance=None) -> ModuleProber:
    return ModuleProber(
        "http://app.test",
        client=_client(handler),
        checks=checks if checks is not None else ComponentCheckRegistry(),
        chance=chance or FixedChance(False),
    )


PAGE = ModuleDescriptor(
    name="News Feed",
    route="/news",
    component_ref="News",
    priority=ModulePriority.HIGH,
    category=ModuleCategory.PAGE,
)


# ---------------------------------------------------------------------------
# Route probes
# ---------------------------------------------------------------------------


class TestRouteProbe:
    @pytest.mark.asyncio
    async def test_healthy_route(self):
        seen = []

        def handler(request):
            seen.append((request.method, str(request.url)))
            return httpx.Response(200)

        item = await _prober(handler).probe(PAGE)
        assert seen == [("HEAD", "http://app.test/news")]
        assert item.status == ModuleStatus.WORKING
        assert item.exists is True
        assert item.issues == []
        assert item.severity == Severity.INFO
        assert item.auto_fixable is False
        assert item.last_checked is not None

    @pytest.mark.asyncio
    async def test_404_marks_missing(self):
        item = await _prober(lambda r: httpx.Response(404)).probe(PAGE)
        assert item.status == ModuleStatus.MISSING
        assert item.exists is False
        assert item.issues == ["Route /news not found"]
        assert item.severity == Severity.CRITICAL
        assert item.auto_fixable is False

    @pytest.mark.asyncio
    async def test_transport_error_marks_broken(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        item = await _prober(handler).probe(PAGE)
        assert item.status == ModuleStatus.BROKEN
        assert item.exists is True
        assert item.issues == ["Route /news unreachable"]
        assert item.auto_fixable is True

    @pytest.mark.asyncio
    async def test_timeout_marks_broken(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        item = await _prober(handler).probe(PAGE)
        assert item.status == ModuleStatus.BROKEN
        assert "timed out" in item.issues[0]

    @pytest.mark.asyncio
    async def test_server_error_marks_broken(self):
        item = await _prober(lambda r: httpx.Response(503)).probe(PAGE)
        assert item.status == ModuleStatus.BROKEN
        assert item.issues == ["Route /news returned HTTP 503"]

    @pytest.mark.asyncio
    async def test_redirect_or_method_not_allowed_counts_as_existing(self):
        item = await _prober(lambda r: httpx.Response(405)).probe(PAGE)
        assert item.status == ModuleStatus.WORKING

    @pytest.mark.asyncio
    async def test_no_route_skips_http(self):
        def handler(request):
            raise AssertionError("should not be called")

        module = ModuleDescriptor(name="App Layout", component_ref="AppLayout")
        item = await _prober(handler).probe(module)
        assert item.status == ModuleStatus.WORKING

    def test_route_url_adds_slash(self):
        prober = ModuleProber("http://app.test/")
        assert prober.route_url("news") == "http://app.test/news"
        assert prober.route_url("/") == "http://app.test/"


# ---------------------------------------------------------------------------
# Component checks
# ---------------------------------------------------------------------------


class TestComponentChecks:
    @pytest.mark.asyncio
    async def test_failing_check_marks_broken(self):
        async def failing(module, chance):
            return ComponentCheckResult(healthy=False, issues=["Bot API connection failed"])

        checks = ComponentCheckRegistry({"News": failing})
        item = await _prober(checks=checks).probe(PAGE)
        assert item.status == ModuleStatus.BROKEN
        assert item.issues == ["Bot API connection failed"]
        assert item.auto_fixable is True

    @pytest.mark.asyncio
    async def test_degraded_check_marks_partial(self):
        async def degraded(module, chance):
            return ComponentCheckResult(
                healthy=False,
                issues=["Cache invalidation issues"],
                status=ModuleStatus.PARTIALLY_WORKING,
            )

        item = await _prober(checks=ComponentCheckRegistry({"News": degraded})).probe(PAGE)
        assert item.status == ModuleStatus.PARTIALLY_WORKING
        assert item.severity == Severity.WARNING

    @pytest.mark.asyncio
    async def test_check_can_mark_not_fixable(self):
        async def failing(module, chance):
            return ComponentCheckResult(healthy=False, issues=["x"], auto_fixable=False)

        item = await _prober(checks=ComponentCheckRegistry({"News": failing})).probe(PAGE)
        assert item.status == ModuleStatus.BROKEN
        assert item.auto_fixable is False

    @pytest.mark.asyncio
    async def test_raising_check_marks_broken(self):
        async def exploding(module, chance):
            raise RuntimeError("import failed")

        item = await _prober(checks=ComponentCheckRegistry({"News": exploding})).probe(PAGE)
        assert item.status == ModuleStatus.BROKEN
        assert item.issues == ["Component News failed to load: import failed"]

    @pytest.mark.asyncio
    async def test_hanging_check_times_out(self):
        async def hanging(module, chance):
            await asyncio.Event().wait()

        prober = ModuleProber(
            "http://app.test",
            client=_client(_ok),
            checks=ComponentCheckRegistry({"News": hanging}),
            chance=FixedChance(False),
            timeout=0.05,
        )
        item = await asyncio.wait_for(prober.probe(PAGE), timeout=2.0)
        assert item.status == ModuleStatus.BROKEN
        assert item.issues == ["Component News timed out after 0.05s"]
        assert item.severity == Severity.CRITICAL
        assert item.auto_fixable is True

    @pytest.mark.asyncio
    async def test_check_skipped_when_route_missing(self):
        called = []

        async def check(module, chance):
            called.append(module.name)
            return ComponentCheckResult()

        checks = ComponentCheckRegistry({"News": check})
        item = await _prober(lambda r: httpx.Response(404), checks=checks).probe(PAGE)
        assert item.status == ModuleStatus.MISSING
        assert called == []

    @pytest.mark.asyncio
    async def test_unregistered_component_is_healthy(self):
        item = await _prober(checks=ComponentCheckRegistry()).probe(PAGE)
        assert item.status == ModuleStatus.WORKING

    def test_registry_operations(self):
        checks = ComponentCheckRegistry()
        checks.register("A", check_cache)
        assert checks.has("A")
        assert checks.get("A") is check_cache
        checks.unregister("A")
        assert checks.get("A") is None

    def test_default_checks(self):
        assert default_component_checks().components == [
            "CacheManagementDashboard",
            "CivicAlertBot",
        ]

    @pytest.mark.asyncio
    async def test_alert_bot_check(self):
        module = ModuleDescriptor(name="Civic Alert Bot", component_ref="CivicAlertBot")
        bad = await check_alert_bot(module, FixedChance(True))
        assert bad.healthy is False
        assert bad.status == ModuleStatus.BROKEN
        good = await check_alert_bot(module, FixedChance(False))
        assert good.healthy is True

    @pytest.mark.asyncio
    async def test_cache_check_degrades(self):
        module = ModuleDescriptor(name="Cache", component_ref="CacheManagementDashboard")
        result = await check_cache(module, FixedChance(True))
        assert result.status == ModuleStatus.PARTIALLY_WORKING
        assert result.issues == ["Cache invalidation issues"]


# ---------------------------------------------------------------------------
# Residual noise and unexpected failures
# ---------------------------------------------------------------------------


class TestNoise:
    @pytest.mark.asyncio
    async def test_noise_flags_minor_issue(self):
        chance = FixedChance(True)
        item = await _prober(chance=chance).probe(PAGE)
        assert item.status == ModuleStatus.PARTIALLY_WORKING
        assert item.issues == ["Minor performance issues detected"]
        assert chance.calls == [0.1]

    @pytest.mark.asyncio
    async def test_noise_not_applied_to_broken(self):
        chance = FixedChance(True)
        item = await _prober(lambda r: httpx.Response(500), chance=chance).probe(PAGE)
        assert item.status == ModuleStatus.BROKEN
        assert chance.calls == []

    @pytest.mark.asyncio
    async def test_noise_probability_configurable(self):
        chance = FixedChance(False)
        prober = ModuleProber(
            client=_client(_ok),
            checks=ComponentCheckRegistry(),
            chance=chance,
            noise_probability=0.0,
        )
        await prober.probe(PAGE)
        assert chance.calls == [0.0]


class TestUnexpectedFailure:
    @pytest.mark.asyncio
    async def test_unexpected_error_is_captured(self):
        class BadChance:
            def chance(self, probability):
                raise ValueError("rng exploded")

        item = await _prober(chance=BadChance()).probe(PAGE)
        assert item.status == ModuleStatus.BROKEN
        assert item.issues == ["System error: rng exploded"]


@pytest.mark.parametrize("code", [404, 410])
@pytest.mark.asyncio
async def test_missing_codes(code):
    item = await _prober(lambda r: httpx.Response(code)).probe(PAGE)
    assert item.status == ModuleStatus.MISSING
