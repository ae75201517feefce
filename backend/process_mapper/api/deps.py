from __future__ import annotations

from fastapi import HTTPException

from process_mapper.core.errors import (
    DuplicateProcessNameError,
    InvalidTransitionError,
    ProcessMapError,
    ProcessNotFoundError,
    SessionNotFoundError,
)
from process_mapper.services.generator_adapter import GeneratorAdapter
from process_mapper.services.mapping_session import SessionStore, session_store

_STATUS_BY_ERROR: tuple[tuple[type[ProcessMapError], int], ...] = (
    (SessionNotFoundError, 404),
    (ProcessNotFoundError, 404),
    (InvalidTransitionError, 409),
    (DuplicateProcessNameError, 409),
)


def http_error(exc: ProcessMapError) -> HTTPException:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status, str(exc))
    return HTTPException(400, str(exc))


def get_session_store() -> SessionStore:
    return session_store


def get_generator() -> GeneratorAdapter | None:
    return GeneratorAdapter.from_settings()
