from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from process_mapper.database import get_db
from process_mapper.models.process_map_report import ProcessMapReport
from process_mapper.services.report_service import get_report, list_reports

router = APIRouter()


def _report_out(report: ProcessMapReport, include_data: bool = False) -> dict:
    out = {
        "id": str(report.id),
        "email": report.email,
        "industry": report.industry,
        "source": report.source,
        "process_count": report.process_count,
        "interaction_count": report.interaction_count,
        "created_at": report.created_at.isoformat() if report.created_at else None,
    }
    if include_data:
        out["data"] = report.data
    return out


@router.get("")
async def list_all(
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    return [_report_out(r) for r in await list_reports(db, limit)]


@router.get("/{report_id}")
async def get_one(report_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    report = await get_report(db, report_id)
    if report is None:
        raise HTTPException(404, "Report not found")
    return _report_out(report, include_data=True)
