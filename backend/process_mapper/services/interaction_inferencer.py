"""Derive interactions and the process-flow summary from a categorized list.

Runs strictly after synthesis: every process must already carry its final
category, since the chaining rule reads nothing else.
"""

from __future__ import annotations

from process_mapper.schemas.process_map import (
    FeedbackLoop,
    Interaction,
    Process,
    ProcessCategory,
    ProcessFlow,
    SupportingFlow,
)

SEQUENTIAL_DESCRIPTION = "Process output feeds next process"


def infer_interactions(processes: list[Process]) -> list[Interaction]:
    """Chain adjacent core processes in list order.

    Only strictly adjacent core/core pairs are connected; a support or
    management process between two core processes breaks the chain.
    """
    interactions: list[Interaction] = []
    for current, following in zip(processes, processes[1:]):
        if current.category == ProcessCategory.CORE and following.category == ProcessCategory.CORE:
            interactions.append(
                Interaction(from_=current.name, to=following.name, description=SEQUENTIAL_DESCRIPTION)
            )
    return interactions


def derive_process_flow(processes: list[Process], interactions: list[Interaction]) -> ProcessFlow:
    """Summarize a map as primary chain, supporting groups and feedback loops."""
    primary = [p.name for p in processes if p.category == ProcessCategory.CORE]
    position = {name: i for i, name in enumerate(primary)}

    supporting: list[SupportingFlow] = []
    for label, category in (
        ("Management Processes", ProcessCategory.MANAGEMENT),
        ("Support Processes", ProcessCategory.SUPPORT),
    ):
        names = [p.name for p in processes if p.category == category]
        if names:
            supporting.append(SupportingFlow(name=label, processes=names))

    loops: list[FeedbackLoop] = []
    for interaction in interactions:
        src = position.get(interaction.from_)
        dst = position.get(interaction.to)
        if src is not None and dst is not None and src > dst:
            loops.append(
                FeedbackLoop(
                    from_=interaction.from_,
                    to=interaction.to,
                    description=interaction.description or "",
                )
            )

    return ProcessFlow(primary_flow=primary, supporting_flows=supporting, feedback_loops=loops)
