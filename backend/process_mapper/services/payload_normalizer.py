"""Validate and normalize generator output into a ``ProcessMap``.

Generator JSON is never used directly.  Every field is checked and defaulted:
invalid categories become ``core``, missing arrays become empty, missing
strings take the same defaults the synthesizer uses, and list fields coming
from the generator are truncated to keep payloads bounded.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from process_mapper.core.errors import MalformedPayloadError
from process_mapper.schemas.process_map import (
    DEFAULT_ISO_CLAUSES,
    DEFAULT_KPI,
    DEFAULT_RISK,
    Interaction,
    Process,
    ProcessCategory,
    ProcessFlow,
    ProcessMap,
    default_owner,
)

logger = logging.getLogger(__name__)

MAX_LIST_ITEMS = 4
UNNAMED_PROCESS = "Unnamed Process"

_VALID_CATEGORIES = {c.value for c in ProcessCategory}


def _text(value: object) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _string_list(value: object, limit: int | None = None) -> list[str]:
    if not isinstance(value, list):
        return []
    items = [_text(v) for v in value]
    items = [v for v in items if v]
    return items[:limit] if limit is not None else items


def _normalize_process(raw: object, index: int, used_ids: set[str]) -> Process:
    data = raw if isinstance(raw, dict) else {}
    name = _text(data.get("name")) or UNNAMED_PROCESS

    category = _text(data.get("category")).lower()
    if category not in _VALID_CATEGORIES:
        category = ProcessCategory.CORE.value

    pid = _text(data.get("id"))
    if not pid or pid in used_ids:
        pid = str(index + 1)
        while pid in used_ids:
            pid = f"{pid}_"
    used_ids.add(pid)

    return Process(
        id=pid,
        name=name,
        category=ProcessCategory(category),
        inputs=_string_list(data.get("inputs"), MAX_LIST_ITEMS),
        outputs=_string_list(data.get("outputs"), MAX_LIST_ITEMS),
        risk=_text(data.get("risk")) or DEFAULT_RISK,
        kpi=_text(data.get("kpi")) or DEFAULT_KPI,
        owner=_text(data.get("owner")) or default_owner(name),
        iso_clauses=_string_list(data.get("isoClauses")) or list(DEFAULT_ISO_CLAUSES),
    )


def _normalize_interaction(raw: object) -> Interaction | None:
    if not isinstance(raw, dict):
        return None
    return Interaction(
        from_=_text(raw.get("from")),
        to=_text(raw.get("to")),
        description=_text(raw.get("description")),
    )


def _normalize_flow(raw: object) -> ProcessFlow | None:
    if not isinstance(raw, dict):
        return None
    try:
        return ProcessFlow.model_validate(raw)
    except ValidationError:
        logger.info("Dropping malformed processFlow from generator payload")
        return None


def normalize_generator_payload(payload: object) -> ProcessMap:
    """Turn an untrusted generator payload into a valid ``ProcessMap``.

    Raises ``MalformedPayloadError`` when the payload is not an object with a
    ``processes`` list; field-level problems are defaulted, not rejected.
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError("Generator payload is not a JSON object")
    raw_processes = payload.get("processes")
    if not isinstance(raw_processes, list):
        raise MalformedPayloadError("Generator payload has no processes list")

    processes: list[Process] = []
    used_ids: set[str] = set()
    seen_names: set[str] = set()
    for index, raw in enumerate(raw_processes):
        process = _normalize_process(raw, index, used_ids)
        # Names are the interaction join key; keep the first occurrence only
        if process.name in seen_names:
            continue
        seen_names.add(process.name)
        processes.append(process)

    raw_interactions = payload.get("interactions")
    interactions: list[Interaction] = []
    if isinstance(raw_interactions, list):
        for raw in raw_interactions:
            interaction = _normalize_interaction(raw)
            if interaction is not None:
                interactions.append(interaction)

    return ProcessMap.from_processes(
        processes,
        interactions,
        _normalize_flow(payload.get("processFlow")),
    )
