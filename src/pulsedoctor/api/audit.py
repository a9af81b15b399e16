# Audit router: run audits and read the latest result.
# Created: 2026-10-18
#
# Mount with:
#     app.include_router(router, prefix="/api/v1")

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from pulsedoctor.api.schemas import (
    AuditResultOut,
    AuditStatus,
    AuditSummary,
    DiagnosticItemOut,
    ModuleDescriptorOut,
    WatchdogRequest,
)
from pulsedoctor.audit.engine import get_audit_engine
from pulsedoctor.audit.errors import (
    AuditInProgressError,
    NotRepairableError,
    RegistryError,
    UnknownModuleError,
)
from pulsedoctor.audit.models import ModuleCategory, ModuleStatus, Severity
from pulsedoctor.audit.registry import load_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Audit"])


@router.get("/audit/registry", response_model=list[ModuleDescriptorOut])
async def get_registry():
    """List the modules an audit walks over."""
    engine = get_audit_engine()
    try:
        registry = load_registry(engine.settings)
    except RegistryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return [module.to_dict() for module in registry.list_modules()]


@router.post("/audit/run", response_model=AuditResultOut)
async def run_audit():
    """Run a full audit and return the result."""
    engine = get_audit_engine()
    try:
        result = await engine.run()
    except AuditInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RegistryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_dict()


@router.post("/audit/cancel")
async def cancel_audit():
    """Stop the active run at the next module boundary."""
    engine = get_audit_engine()
    return {"cancelled": engine.cancel()}


@router.get("/audit/status", response_model=AuditStatus)
async def get_audit_status():
    """Progress of the active run and whether a result is available."""
    return get_audit_engine().status()


@router.get("/audit/result", response_model=AuditResultOut)
async def get_audit_result():
    """The latest completed audit."""
    engine = get_audit_engine()
    if engine.result is None:
        raise HTTPException(status_code=404, detail="No audit has been run yet")
    return engine.result.to_dict()


@router.get("/audit/summary", response_model=AuditSummary)
async def get_audit_summary():
    """Aggregate counters over the latest audit."""
    return get_audit_engine().reporter.summary()


@router.get("/audit/modules", response_model=list[DiagnosticItemOut])
async def list_audited_modules(
    category: ModuleCategory | None = Query(None),
    status: ModuleStatus | None = Query(None),
    severity: Severity | None = Query(None),
    with_issues: bool = False,
):
    """Items of the latest audit, optionally filtered."""
    reporter = get_audit_engine().reporter
    items = reporter.filter(category=category, status=status, severity=severity)
    if with_issues:
        items = [item for item in items if item.issues]
    return [item.to_dict() for item in items]


@router.post("/audit/modules/{module_id}/repair", response_model=AuditResultOut)
async def repair_module(module_id: str):
    """Re-attempt the repair of one auto-fixable module from the latest audit."""
    engine = get_audit_engine()
    try:
        result = await engine.repair(module_id)
    except UnknownModuleError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (AuditInProgressError, NotRepairableError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return result.to_dict()


@router.get("/audit/report")
async def download_report():
    """The latest audit as a downloadable JSON report."""
    report = get_audit_engine().reporter.export_report()
    if report is None:
        raise HTTPException(status_code=404, detail="No audit has been run yet")
    filename = f"camerpulse-health-report-{datetime.now(UTC).strftime('%Y-%m-%d')}.json"
    return Response(
        content=json.dumps(report, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/audit/watchdog", response_model=AuditStatus)
async def set_watchdog(body: WatchdogRequest):
    """Turn periodic audits on or off."""
    engine = get_audit_engine()
    if body.enabled:
        engine.start_watchdog(body.interval)
    else:
        await engine.stop_watchdog()
    return engine.status()
