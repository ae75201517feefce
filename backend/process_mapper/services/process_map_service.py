"""Process map generation pipeline.

Deterministic path: resolve industry, synthesize, infer interactions.  When a
generator adapter is configured it gets exactly one attempt first; any
failure falls back to the deterministic path, so a map is always produced.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from process_mapper.core.errors import GeneratorUnavailableError, MalformedPayloadError
from process_mapper.core.metrics import (
    generator_call_duration_seconds,
    generator_fallbacks_total,
    process_map_generations_total,
)
from process_mapper.schemas.process_map import ProcessMap
from process_mapper.services.generator_adapter import GeneratorAdapter
from process_mapper.services.industry_resolver import resolve_industry
from process_mapper.services.interaction_inferencer import derive_process_flow, infer_interactions
from process_mapper.services.payload_normalizer import normalize_generator_payload
from process_mapper.services.process_synthesizer import synthesize

logger = logging.getLogger(__name__)

SOURCE_GENERATOR = "generator"
SOURCE_BENCHMARK = "benchmark"
SOURCE_USER = "user"


@dataclass
class GenerationResult:
    process_map: ProcessMap
    industry_label: str
    source: str


def build_deterministic_map(industry: str, user_processes: list[str]) -> GenerationResult:
    benchmark = resolve_industry(industry)
    processes = synthesize(user_processes, benchmark)
    interactions = infer_interactions(processes)
    process_map = ProcessMap.from_processes(
        processes, interactions, derive_process_flow(processes, interactions)
    )
    if benchmark is None:
        return GenerationResult(process_map, (industry or "").strip(), SOURCE_USER)
    return GenerationResult(process_map, benchmark.industry, SOURCE_BENCHMARK)


def _fall_back(reason: str, message: str, *args) -> None:
    logger.warning(message + ", using benchmark data", *args, extra={"fallback_reason": reason})
    generator_fallbacks_total.labels(reason=reason).inc()


async def _try_generator(
    adapter: GeneratorAdapter, industry: str, user_processes: list[str]
) -> ProcessMap | None:
    start = time.perf_counter()
    try:
        payload = await asyncio.wait_for(
            adapter.generate(industry, user_processes), timeout=adapter.timeout
        )
        process_map = normalize_generator_payload(payload)
    except asyncio.TimeoutError:
        _fall_back("timeout", "Generator timed out after %.1fs", adapter.timeout)
        return None
    except GeneratorUnavailableError as exc:
        _fall_back("unavailable", "Generator unavailable (%s)", exc)
        return None
    except MalformedPayloadError as exc:
        _fall_back("malformed", "Generator returned a malformed payload (%s)", exc)
        return None
    except (TypeError, ValueError) as exc:
        # Payload shapes the normalizer did not anticipate
        _fall_back("malformed", "Generator payload could not be read (%s)", exc)
        return None
    finally:
        generator_call_duration_seconds.observe(time.perf_counter() - start)

    if not process_map.processes:
        _fall_back("empty", "Generator returned no processes")
        return None

    if process_map.process_flow is None:
        process_map.process_flow = derive_process_flow(
            process_map.processes, process_map.interactions
        )
    return process_map


async def generate_process_map(
    industry: str,
    user_processes: list[str],
    adapter: GeneratorAdapter | None = None,
) -> GenerationResult:
    """Produce a process map for *industry* and the user's process names.

    Never raises for generator problems: those are logged, counted and
    answered with the deterministic map.
    """
    deterministic = build_deterministic_map(industry, user_processes)

    if adapter is not None:
        label = deterministic.industry_label or industry
        generated = await _try_generator(adapter, label, user_processes)
        if generated is not None:
            process_map_generations_total.labels(source=SOURCE_GENERATOR).inc()
            logger.info(
                "Generated process map for %r via generator (%d processes)",
                label,
                len(generated.processes),
            )
            return GenerationResult(generated, label, SOURCE_GENERATOR)

    process_map_generations_total.labels(source=deterministic.source).inc()
    logger.info(
        "Generated process map for %r from %s data (%d processes)",
        deterministic.industry_label,
        deterministic.source,
        len(deterministic.process_map.processes),
    )
    return deterministic
