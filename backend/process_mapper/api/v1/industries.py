from __future__ import annotations

from fastapi import APIRouter

from process_mapper.schemas.session import IndustryResolveRequest
from process_mapper.services.benchmark_catalog import INDUSTRY_BENCHMARKS
from process_mapper.services.industry_resolver import resolve_industry

router = APIRouter()


@router.get("")
async def list_industries():
    return [
        {
            "industry": b.industry,
            "core": list(b.core),
            "support": list(b.support),
            "management": list(b.management),
        }
        for b in INDUSTRY_BENCHMARKS
    ]


@router.post("/resolve")
async def resolve(body: IndustryResolveRequest):
    benchmark = resolve_industry(body.industry)
    return {"industry": benchmark.industry if benchmark else None}
