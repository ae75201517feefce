"""Report snapshots: persist a finished map and deliver it by email."""

from __future__ import annotations

import json
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from process_mapper.core.errors import InvalidTransitionError
from process_mapper.core.metrics import report_snapshots_total
from process_mapper.models.process_map_report import ProcessMapReport
from process_mapper.services.email_service import send_report_email
from process_mapper.services.export_service import export_json, render_html_report
from process_mapper.services.mapping_session import MappingSession

logger = logging.getLogger(__name__)


async def create_report_snapshot(db: AsyncSession, session: MappingSession) -> ProcessMapReport:
    """Persist the session's map and move the session from gated to results."""
    process_map = session.require_map("complete the report")
    ticket = session.begin_completion()

    report = ProcessMapReport(
        email=session.email or "",
        industry=session.industry_label,
        source=session.source or "",
        data=json.loads(export_json(process_map, session.industry_label)),
        process_count=len(process_map.processes),
        interaction_count=len(process_map.interactions),
    )
    db.add(report)
    try:
        await db.commit()
        await db.refresh(report)
    except Exception:
        session.abandon_completion(ticket)
        raise

    if not session.finish_completion(ticket, str(report.id)):
        # The session moved on while the snapshot was being written
        await db.delete(report)
        await db.commit()
        logger.info(
            "Discarded report %s, session left the report step",
            report.id,
            extra={"session_id": session.id, "report_id": str(report.id)},
        )
        raise InvalidTransitionError(session.state.value, "complete the report")

    report_snapshots_total.inc()
    logger.info(
        "Stored report %s (%d processes)",
        report.id,
        report.process_count,
        extra={"session_id": session.id},
    )

    if report.email:
        await send_report_email(
            report.email,
            report.industry,
            render_html_report(process_map, report.industry),
            report.process_count,
        )
    return report


async def get_report(db: AsyncSession, report_id: uuid.UUID) -> ProcessMapReport | None:
    result = await db.execute(select(ProcessMapReport).where(ProcessMapReport.id == report_id))
    return result.scalar_one_or_none()


async def list_reports(db: AsyncSession, limit: int = 50) -> list[ProcessMapReport]:
    result = await db.execute(
        select(ProcessMapReport).order_by(ProcessMapReport.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())
