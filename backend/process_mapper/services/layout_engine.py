"""Deterministic layouts for a process map.

Three independent projections of the same ``(processes, interactions)`` pair:

- hierarchy: management / core / support bands, core band chained left to right
- network: per-process inbound and outbound interaction lists
- flow: square-ish grid with coordinates and straight connectors, used by the
  SVG exporter

Every function is pure.  Empty process lists produce empty layouts, and
interactions that name an unknown process are skipped where a position is
needed and kept everywhere else.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from process_mapper.schemas.layout import (
    BandConnector,
    FlowConnector,
    FlowLayout,
    FlowNode,
    HierarchyBand,
    HierarchyLayout,
    HierarchyNode,
    InteractionNote,
    MapSummary,
    NetworkGroup,
    NetworkLayout,
    NetworkNode,
)
from process_mapper.schemas.process_map import (
    CATEGORY_ORDER,
    Interaction,
    Process,
    ProcessCategory,
)

BAND_TITLES = {
    ProcessCategory.MANAGEMENT: "MANAGEMENT PROCESSES",
    ProcessCategory.CORE: "CORE PROCESSES",
    ProcessCategory.SUPPORT: "SUPPORT PROCESSES",
}


@dataclass(frozen=True)
class FlowStyle:
    css_class: str
    fill: str
    stroke: str


FLOW_STYLES: dict[str, FlowStyle] = {
    "core": FlowStyle("core-process", "#10b981", "#047857"),
    "support": FlowStyle("support-process", "#f59e0b", "#d97706"),
    "management": FlowStyle("management-process", "#8b5cf6", "#7c3aed"),
    "unknown": FlowStyle("unknown-process", "#9ca3af", "#6b7280"),
}


@dataclass(frozen=True)
class FlowCanvas:
    width: int = 1200
    height: int = 800
    box_width: float = 160
    box_height: float = 80
    margin_x: float = 50
    margin_top: float = 80
    reserved_height: float = 150  # title + legend
    label_chars: int = 18
    label_lines: int = 2


def _category_value(category: ProcessCategory | str) -> str:
    return category.value if isinstance(category, ProcessCategory) else str(category)


def style_bucket(category: ProcessCategory | str) -> str:
    value = _category_value(category)
    return value if value in FLOW_STYLES else "unknown"


def wrap_label(text: str | None, max_chars: int = 18, max_lines: int = 2) -> list[str]:
    """Greedy word wrap. Never cuts mid-word; words past *max_lines* are dropped."""
    words = (text or "").split()
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars or not current:
            current = candidate
            continue
        lines.append(current)
        current = word
        if len(lines) >= max_lines:
            current = ""
            break
    if current and len(lines) < max_lines:
        lines.append(current)
    return lines


def _group(processes: list[Process]) -> list[tuple[ProcessCategory, list[Process]]]:
    groups = []
    for category in CATEGORY_ORDER:
        members = [p for p in processes if p.category == category]
        if members:
            groups.append((category, members))
    return groups


# ── Hierarchy ──────────────────────────────────────────────────────────


def hierarchy_layout(processes: list[Process], interactions: list[Interaction]) -> HierarchyLayout:
    bands: list[HierarchyBand] = []
    for category, members in _group(processes):
        connectors: list[BandConnector] = []
        if category == ProcessCategory.CORE:
            connectors = [
                BandConnector(from_=a.name, to=b.name) for a, b in zip(members, members[1:])
            ]
        bands.append(
            HierarchyBand(
                category=category,
                title=BAND_TITLES[category],
                processes=[HierarchyNode(id=p.id, name=p.name) for p in members],
                connectors=connectors,
            )
        )

    notes = [
        InteractionNote(from_=i.from_, to=i.to, description=i.description or None)
        for i in interactions
    ]
    return HierarchyLayout(bands=bands, interactions=notes)


# ── Network ────────────────────────────────────────────────────────────


def network_layout(processes: list[Process], interactions: list[Interaction]) -> NetworkLayout:
    groups: list[NetworkGroup] = []
    for category, members in _group(processes):
        nodes = []
        for process in members:
            incoming = [i.from_ for i in interactions if i.to == process.name]
            outgoing = [i.to for i in interactions if i.from_ == process.name]
            nodes.append(
                NetworkNode(
                    id=process.id,
                    name=process.name,
                    category=category,
                    receives_from=incoming or None,
                    sends_to=outgoing or None,
                )
            )
        groups.append(NetworkGroup(category=category, title=BAND_TITLES[category], nodes=nodes))
    return NetworkLayout(groups=groups)


# ── Flow diagram ───────────────────────────────────────────────────────


def grid_dimensions(count: int) -> tuple[int, int]:
    """Return (columns, rows) for *count* cells; (0, 0) when empty."""
    if count <= 0:
        return 0, 0
    columns = math.ceil(math.sqrt(count))
    rows = math.ceil(count / columns)
    return columns, rows


def grid_cell(index: int, columns: int) -> tuple[int, int]:
    """Row-major (column, row) of the *index*-th process."""
    return index % columns, index // columns


def flow_layout(
    processes: list[Process],
    interactions: list[Interaction],
    canvas: FlowCanvas = FlowCanvas(),
) -> FlowLayout:
    columns, rows = grid_dimensions(len(processes))
    layout = FlowLayout(width=canvas.width, height=canvas.height, columns=columns, rows=rows)
    if not processes:
        return layout

    spacing_x = (canvas.width - 2 * canvas.margin_x) / columns
    spacing_y = (canvas.height - canvas.reserved_height) / rows
    # Shrink boxes when the grid gets dense so neighbours never overlap
    box_w = min(canvas.box_width, spacing_x * 0.9)
    box_h = min(canvas.box_height, spacing_y * 0.9)

    by_name: dict[str, FlowNode] = {}
    for index, process in enumerate(processes):
        col, row = grid_cell(index, columns)
        x = canvas.margin_x + col * spacing_x + (spacing_x - box_w) / 2
        y = canvas.margin_top + row * spacing_y + (spacing_y - box_h) / 2
        node = FlowNode(
            id=process.id,
            name=process.name,
            category=_category_value(process.category),
            style=style_bucket(process.category),
            column=col,
            row=row,
            x=round(x, 2),
            y=round(y, 2),
            width=round(box_w, 2),
            height=round(box_h, 2),
            center_x=round(x + box_w / 2, 2),
            center_y=round(y + box_h / 2, 2),
            label_lines=wrap_label(process.name, canvas.label_chars, canvas.label_lines),
        )
        layout.nodes.append(node)
        by_name.setdefault(process.name, node)

    for interaction in interactions:
        src = by_name.get(interaction.from_)
        dst = by_name.get(interaction.to)
        if src is None or dst is None:
            layout.skipped_connectors += 1
            continue
        layout.connectors.append(
            FlowConnector(
                from_=interaction.from_,
                to=interaction.to,
                x1=src.center_x,
                y1=src.center_y,
                x2=dst.center_x,
                y2=dst.center_y,
                description=interaction.description or None,
            )
        )
    return layout


# ── Summary ────────────────────────────────────────────────────────────


def map_summary(processes: list[Process], interactions: list[Interaction]) -> MapSummary:
    return MapSummary(
        total_processes=len(processes),
        core=sum(1 for p in processes if p.category == ProcessCategory.CORE),
        support=sum(1 for p in processes if p.category == ProcessCategory.SUPPORT),
        management=sum(1 for p in processes if p.category == ProcessCategory.MANAGEMENT),
        interactions=len(interactions),
    )
