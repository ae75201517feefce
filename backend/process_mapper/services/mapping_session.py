"""Mapping session state machine and its in-process store.

A session walks ``input -> generated -> editing -> gated -> results``.  Each
step is an explicit method; anything else raises ``InvalidTransitionError``.

Generation is asynchronous, so a session hands out tickets: the caller takes
a ticket with ``begin_generation()``, awaits the pipeline, then offers the
result back with ``apply_generation()``.  Results carrying a stale ticket
(another generation started, or the user went back / started over in the
meantime) are discarded.

Completing the report works the same way: ``begin_completion()`` claims the
gated session before the snapshot is written, so a second completion is
rejected up front and a back / start-over during the write is detected by
``finish_completion()``.
"""

from __future__ import annotations

import enum
import logging
import uuid
from collections import OrderedDict
from datetime import datetime, timezone

from process_mapper.config import settings
from process_mapper.core.errors import InvalidTransitionError, SessionNotFoundError
from process_mapper.core.metrics import mapping_sessions_active
from process_mapper.schemas.process_map import Process, ProcessCreate, ProcessMap, ProcessUpdate
from process_mapper.services.interaction_inferencer import derive_process_flow
from process_mapper.services.process_map_service import GenerationResult

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    INPUT = "input"
    GENERATED = "generated"
    EDITING = "editing"
    GATED = "gated"
    RESULTS = "results"


class MappingSession:
    def __init__(self, session_id: str | None = None):
        self.id = session_id or str(uuid.uuid4())
        self.created_at = datetime.now(timezone.utc)
        self.state = SessionState.INPUT
        self.industry_text = ""
        self.user_processes: list[str] = []
        self.industry_label = ""
        self.source: str | None = None
        self.process_map: ProcessMap | None = None
        self.email: str | None = None
        self.report_id: str | None = None
        self._ticket = 0
        self._completing: int | None = None
        self._gated_from = SessionState.GENERATED

    # ── helpers ──────────────────────────────────────────────────────

    def _require(self, action: str, *allowed: SessionState) -> None:
        if self.state not in allowed:
            raise InvalidTransitionError(self.state.value, action)

    def _invalidate_pending(self) -> None:
        self._ticket += 1
        self._completing = None

    def _refresh_flow(self) -> None:
        pm = self.process_map
        pm.process_flow = derive_process_flow(pm.processes, pm.interactions)

    # ── generation ───────────────────────────────────────────────────

    def begin_generation(self, industry_text: str, user_processes: list[str]) -> int:
        self._require("generate", SessionState.INPUT)
        self.industry_text = industry_text
        self.user_processes = list(user_processes)
        self._ticket += 1
        return self._ticket

    def apply_generation(self, ticket: int, result: GenerationResult) -> bool:
        """Apply *result* if *ticket* is still current; return whether it was."""
        if ticket != self._ticket or self.state != SessionState.INPUT:
            logger.info(
                "Discarding stale generation result for session %s",
                self.id,
                extra={"session_id": self.id},
            )
            return False
        self.process_map = result.process_map
        self.industry_label = result.industry_label
        self.source = result.source
        self.state = SessionState.GENERATED
        return True

    # ── report completion ────────────────────────────────────────────

    def begin_completion(self) -> int:
        self._require("complete the report", SessionState.GATED)
        if self._completing is not None:
            raise InvalidTransitionError(self.state.value, "complete the report again")
        self._ticket += 1
        self._completing = self._ticket
        return self._ticket

    def finish_completion(self, ticket: int, report_id: str) -> bool:
        """Move to results if the claim taken by *ticket* still holds."""
        if ticket != self._completing or self.state != SessionState.GATED:
            return False
        self._completing = None
        self.complete(report_id)
        return True

    def abandon_completion(self, ticket: int) -> None:
        if ticket == self._completing:
            self._completing = None

    # ── transitions ──────────────────────────────────────────────────

    def edit(self) -> None:
        self._require("edit", SessionState.GENERATED)
        self.state = SessionState.EDITING

    def request_report(self, email: str) -> None:
        self._require("request a report", SessionState.GENERATED, SessionState.EDITING)
        self._gated_from = self.state
        self.email = email
        self.state = SessionState.GATED

    def complete(self, report_id: str) -> None:
        self._require("complete the report", SessionState.GATED)
        self.report_id = report_id
        self.state = SessionState.RESULTS

    def back(self) -> None:
        if self.state == SessionState.GENERATED:
            self.state = SessionState.INPUT
        elif self.state == SessionState.EDITING:
            self.state = SessionState.GENERATED
        elif self.state == SessionState.GATED:
            self.state = self._gated_from
        elif self.state == SessionState.RESULTS:
            self.state = SessionState.GATED
        else:
            raise InvalidTransitionError(self.state.value, "go back")
        # A generation started before stepping back must not land afterwards
        self._invalidate_pending()

    def start_over(self) -> None:
        self._invalidate_pending()
        self.state = SessionState.INPUT
        self.industry_text = ""
        self.user_processes = []
        self.industry_label = ""
        self.source = None
        self.process_map = None
        self.email = None
        self.report_id = None
        self._gated_from = SessionState.GENERATED

    # ── process edits (editing state only) ───────────────────────────

    def add_process(self, data: ProcessCreate) -> Process:
        self._require("add a process", SessionState.EDITING)
        process = self.process_map.add_process(data)
        self._refresh_flow()
        return process

    def update_process(self, process_id: str, data: ProcessUpdate) -> Process:
        self._require("update a process", SessionState.EDITING)
        process = self.process_map.update_process(process_id, data)
        self._refresh_flow()
        return process

    def delete_process(self, process_id: str) -> Process:
        self._require("delete a process", SessionState.EDITING)
        process = self.process_map.delete_process(process_id)
        self._refresh_flow()
        return process

    def require_map(self, action: str) -> ProcessMap:
        if self.process_map is None:
            raise InvalidTransitionError(self.state.value, action)
        return self.process_map


class SessionStore:
    """In-process session registry, bounded; the oldest session is evicted first."""

    def __init__(self, max_sessions: int | None = None) -> None:
        self.max_sessions = max_sessions or settings.MAX_SESSIONS
        self._sessions: OrderedDict[str, MappingSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> MappingSession:
        session = MappingSession()
        while len(self._sessions) >= self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Evicting mapping session %s", evicted_id, extra={"session_id": evicted_id})
        self._sessions[session.id] = session
        mapping_sessions_active.set(len(self._sessions))
        return session

    def get(self, session_id: str) -> MappingSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def discard(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        mapping_sessions_active.set(len(self._sessions))

    def clear(self) -> None:
        self._sessions.clear()
        mapping_sessions_active.set(0)


session_store = SessionStore()
