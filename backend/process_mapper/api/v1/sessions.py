import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from process_mapper.api.deps import get_generator, get_session_store, http_error
from process_mapper.config import settings
from process_mapper.core.errors import ProcessMapError
from process_mapper.core.rate_limit import limiter
from process_mapper.database import get_db
from process_mapper.schemas.process_map import ProcessCreate, ProcessUpdate
from process_mapper.schemas.session import GenerateRequest, ReportRequest
from process_mapper.services import export_service
from process_mapper.services.generator_adapter import GeneratorAdapter
from process_mapper.services.layout_engine import (
    flow_layout,
    hierarchy_layout,
    map_summary,
    network_layout,
)
from process_mapper.services.mapping_session import MappingSession, SessionStore
from process_mapper.services.process_map_service import generate_process_map
from process_mapper.services.process_synthesizer import parse_process_lines
from process_mapper.services.report_service import create_report_snapshot

logger = logging.getLogger(__name__)

router = APIRouter()

_EXPORT_MEDIA_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
    "html": "text/html",
    "svg": "image/svg+xml",
}


def _session_out(session: MappingSession) -> dict:
    pm = session.process_map
    return {
        "id": session.id,
        "state": session.state.value,
        "industry": session.industry_text,
        "industryLabel": session.industry_label,
        "processes": session.user_processes,
        "source": session.source,
        "email": session.email,
        "reportId": session.report_id,
        "createdAt": session.created_at.isoformat(),
        "processMap": pm.to_export_dict() if pm else None,
        "summary": map_summary(pm.processes, pm.interactions).model_dump() if pm else None,
    }


def _get(store: SessionStore, session_id: str) -> MappingSession:
    try:
        return store.get(session_id)
    except ProcessMapError as exc:
        raise http_error(exc) from exc


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


@router.post("", status_code=201)
async def create_session(store: SessionStore = Depends(get_session_store)):
    return _session_out(store.create())


@router.get("/{session_id}")
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    return _session_out(_get(store, session_id))


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        store.discard(session_id)
    except ProcessMapError as exc:
        raise http_error(exc) from exc


@router.post("/{session_id}/generate")
@limiter.limit(settings.GENERATE_RATE_LIMIT)
async def generate(
    request: Request,
    session_id: str,
    body: GenerateRequest,
    store: SessionStore = Depends(get_session_store),
    adapter: GeneratorAdapter | None = Depends(get_generator),
):
    session = _get(store, session_id)
    user_processes = parse_process_lines(body.processes)
    try:
        ticket = session.begin_generation(body.industry, user_processes)
    except ProcessMapError as exc:
        raise http_error(exc) from exc

    result = await generate_process_map(body.industry, user_processes, adapter=adapter)
    if not session.apply_generation(ticket, result):
        raise HTTPException(409, "Session changed while the process map was being generated")
    return _session_out(session)


@router.post("/{session_id}/edit")
async def edit(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = _get(store, session_id)
    try:
        session.edit()
    except ProcessMapError as exc:
        raise http_error(exc) from exc
    return _session_out(session)


@router.post("/{session_id}/back")
async def back(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = _get(store, session_id)
    try:
        session.back()
    except ProcessMapError as exc:
        raise http_error(exc) from exc
    return _session_out(session)


@router.post("/{session_id}/start-over")
async def start_over(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = _get(store, session_id)
    session.start_over()
    return _session_out(session)


# ---------------------------------------------------------------------------
# Process edits
# ---------------------------------------------------------------------------


@router.post("/{session_id}/processes", status_code=201)
async def add_process(
    session_id: str, body: ProcessCreate, store: SessionStore = Depends(get_session_store)
):
    session = _get(store, session_id)
    try:
        process = session.add_process(body)
    except ProcessMapError as exc:
        raise http_error(exc) from exc
    return process.model_dump(mode="json", by_alias=True)


@router.patch("/{session_id}/processes/{process_id}")
async def update_process(
    session_id: str,
    process_id: str,
    body: ProcessUpdate,
    store: SessionStore = Depends(get_session_store),
):
    session = _get(store, session_id)
    try:
        process = session.update_process(process_id, body)
    except ProcessMapError as exc:
        raise http_error(exc) from exc
    return process.model_dump(mode="json", by_alias=True)


@router.delete("/{session_id}/processes/{process_id}", status_code=204)
async def delete_process(
    session_id: str, process_id: str, store: SessionStore = Depends(get_session_store)
):
    session = _get(store, session_id)
    try:
        session.delete_process(process_id)
    except ProcessMapError as exc:
        raise http_error(exc) from exc


# ---------------------------------------------------------------------------
# Layouts & exports
# ---------------------------------------------------------------------------


@router.get("/{session_id}/layouts/{kind}")
async def get_layout(session_id: str, kind: str, store: SessionStore = Depends(get_session_store)):
    session = _get(store, session_id)
    try:
        pm = session.require_map("render a layout")
    except ProcessMapError as exc:
        raise http_error(exc) from exc

    if kind == "hierarchy":
        layout = hierarchy_layout(pm.processes, pm.interactions)
    elif kind == "network":
        layout = network_layout(pm.processes, pm.interactions)
    elif kind == "flow":
        layout = flow_layout(pm.processes, pm.interactions)
    else:
        raise HTTPException(404, f"Unknown layout '{kind}'")
    return layout.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.get("/{session_id}/export/{fmt}")
async def export(session_id: str, fmt: str, store: SessionStore = Depends(get_session_store)):
    if fmt not in _EXPORT_MEDIA_TYPES:
        raise HTTPException(404, f"Unknown export format '{fmt}'")
    session = _get(store, session_id)
    try:
        pm = session.require_map("export")
    except ProcessMapError as exc:
        raise http_error(exc) from exc

    label = session.industry_label
    if fmt == "csv":
        content = export_service.export_csv(pm)
    elif fmt == "json":
        content = export_service.export_json(pm, label)
    elif fmt == "html":
        content = export_service.render_html_report(pm, label)
    else:
        content = export_service.render_svg(pm, label)

    filename = export_service.export_filename(label, fmt)
    return Response(
        content=content,
        media_type=_EXPORT_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# ---------------------------------------------------------------------------
# Report gate
# ---------------------------------------------------------------------------


@router.post("/{session_id}/report")
async def request_report(
    session_id: str, body: ReportRequest, store: SessionStore = Depends(get_session_store)
):
    session = _get(store, session_id)
    try:
        session.request_report(body.email)
    except ProcessMapError as exc:
        raise http_error(exc) from exc
    return _session_out(session)


@router.post("/{session_id}/report/complete")
async def complete_report(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    db: AsyncSession = Depends(get_db),
):
    session = _get(store, session_id)
    try:
        report = await create_report_snapshot(db, session)
    except ProcessMapError as exc:
        raise http_error(exc) from exc
    logger.info("Session %s reached results", session.id, extra={"session_id": session.id})
    return {**_session_out(session), "reportId": str(report.id)}
