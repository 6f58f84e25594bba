"""Report and dashboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from models.report import DashboardStats, SchoolReport
from services.date_ranges import RangePreset, resolve_preset
from services.school_store import get_school_store

router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/reports")
async def get_report(
    preset: RangePreset = Query(RangePreset.ALL_TIME, alias="range"),
) -> SchoolReport:
    """Every report section over a preset date range."""
    return await get_school_store().reports.build_report(resolve_preset(preset))


@router.get("/dashboard")
async def get_dashboard() -> DashboardStats:
    return await get_school_store().reports.dashboard()
