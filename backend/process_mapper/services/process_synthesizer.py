"""Merge user-entered process names with benchmark data into a process list.

Merge order:

 1. User processes (trimmed, blanks removed, order kept)
 2. Benchmark core processes not already covered by a user entry
 3. Up to 3 benchmark support processes
 4. Up to 2 benchmark management processes

Coverage is a loose first-token containment test: a user entry covers a
benchmark process when the lowercased entry contains the first word of the
lowercased benchmark name.  It is approximate on purpose and both over- and
under-merges; generated maps depend on exactly this behaviour.

Support and management names are appended without any coverage check.  Only
exact duplicate names are dropped afterwards, because names are the join key
for interactions.
"""

from __future__ import annotations

from process_mapper.schemas.process_map import (
    DEFAULT_ISO_CLAUSES,
    DEFAULT_KPI,
    DEFAULT_RISK,
    Process,
    ProcessCategory,
    default_inputs,
    default_outputs,
    default_owner,
)
from process_mapper.services.benchmark_catalog import IndustryBenchmark

MAX_SUPPORT_PROCESSES = 3
MAX_MANAGEMENT_PROCESSES = 2


def parse_process_lines(text: str | None) -> list[str]:
    """Collapse newline-delimited form text into trimmed, non-empty names."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def _first_token(name: str) -> str:
    parts = name.lower().split()
    return parts[0] if parts else ""


def is_covered(benchmark_name: str, user_processes: list[str]) -> bool:
    """True when any user entry contains the benchmark name's first token."""
    token = _first_token(benchmark_name)
    if not token:
        return False
    return any(token in up.lower() for up in user_processes)


def merge_process_names(
    user_process_names: list[str],
    benchmark: IndustryBenchmark | None,
) -> list[str]:
    user = [n.strip() for n in user_process_names if n and n.strip()]
    names = list(user)

    if benchmark is not None:
        names.extend(bp for bp in benchmark.core if not is_covered(bp, user))
        names.extend(benchmark.support[:MAX_SUPPORT_PROCESSES])
        names.extend(benchmark.management[:MAX_MANAGEMENT_PROCESSES])

    # dict preserves first-seen order
    return list(dict.fromkeys(names))


def categorize(name: str, benchmark: IndustryBenchmark | None) -> ProcessCategory:
    if benchmark is not None:
        if name in benchmark.core:
            return ProcessCategory.CORE
        if name in benchmark.support:
            return ProcessCategory.SUPPORT
        if name in benchmark.management:
            return ProcessCategory.MANAGEMENT
    return ProcessCategory.CORE


def _cycle(values: tuple[str, ...], index: int, fallback: str) -> str:
    if not values:
        return fallback
    return values[index % len(values)]


def synthesize(
    user_process_names: list[str],
    benchmark: IndustryBenchmark | None,
) -> list[Process]:
    """Build the attribute-complete, categorized process list for a new map.

    Returns an empty list when there is neither user input nor a benchmark.
    """
    names = merge_process_names(user_process_names, benchmark)
    risks = benchmark.risks if benchmark else ()
    kpis = benchmark.kpis if benchmark else ()

    processes: list[Process] = []
    for index, name in enumerate(names):
        processes.append(
            Process(
                id=str(index + 1),
                name=name,
                category=categorize(name, benchmark),
                inputs=default_inputs(name),
                outputs=default_outputs(name),
                risk=_cycle(risks, index, DEFAULT_RISK),
                kpi=_cycle(kpis, index, DEFAULT_KPI),
                owner=default_owner(name),
                iso_clauses=list(DEFAULT_ISO_CLAUSES),
            )
        )
    return processes
