"""Match free-text industry descriptions to a benchmark catalog entry."""

from __future__ import annotations

import logging

from process_mapper.services.benchmark_catalog import INDUSTRY_BENCHMARKS, IndustryBenchmark

logger = logging.getLogger(__name__)

# Keyword families, checked in order; the first family with a token contained
# in the input wins.  Several families can match the same text ("health tech"),
# so the order here decides the outcome and must not change.
KEYWORD_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("manufactur", "production"), "Manufacturing"),
    (("software", "tech", "development"), "Software Development"),
    (("health", "medical", "hospital"), "Healthcare Services"),
    (("financ", "bank", "insurance"), "Financial Services"),
    (("consult", "advisory", "professional services"), "Consulting"),
)


def _normalize(text: str | None) -> str:
    return (text or "").strip().lower()


def resolve_industry(
    industry_text: str | None,
    catalog: tuple[IndustryBenchmark, ...] = INDUSTRY_BENCHMARKS,
) -> IndustryBenchmark | None:
    """Return the benchmark for *industry_text*, or None when nothing matches.

    None means "no benchmark available" and is a normal outcome.
    """
    normalized = _normalize(industry_text)
    if not normalized:
        return None

    # Containment in either direction against catalog labels
    for benchmark in catalog:
        label = benchmark.industry.lower()
        if normalized in label or label in normalized:
            return benchmark

    for tokens, label in KEYWORD_RULES:
        if any(token in normalized for token in tokens):
            return next((b for b in catalog if b.industry == label), None)

    logger.debug("No benchmark for industry %r", industry_text)
    return None
