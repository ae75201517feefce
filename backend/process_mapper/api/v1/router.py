from fastapi import APIRouter

from process_mapper.api.v1 import industries, reports, sessions

api_router = APIRouter()

api_router.include_router(industries.router, prefix="/industries", tags=["industries"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
