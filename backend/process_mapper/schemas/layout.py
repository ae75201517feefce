from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from process_mapper.schemas.process_map import ProcessCategory


class _AliasModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ── Hierarchy ──────────────────────────────────────────────────────────


class HierarchyNode(BaseModel):
    id: str
    name: str


class BandConnector(_AliasModel):
    """Visual arrow between consecutive core processes (not an Interaction)."""

    from_: str = Field(alias="from")
    to: str


class HierarchyBand(BaseModel):
    category: ProcessCategory
    title: str
    processes: list[HierarchyNode]
    connectors: list[BandConnector] = []


class InteractionNote(_AliasModel):
    from_: str = Field(alias="from")
    to: str
    description: str | None = None


class HierarchyLayout(BaseModel):
    bands: list[HierarchyBand]
    interactions: list[InteractionNote] = []


# ── Network ────────────────────────────────────────────────────────────


class NetworkNode(BaseModel):
    id: str
    name: str
    category: ProcessCategory
    # None (not []) when there is nothing to list, so the section is omitted
    receives_from: list[str] | None = None
    sends_to: list[str] | None = None


class NetworkGroup(BaseModel):
    category: ProcessCategory
    title: str
    nodes: list[NetworkNode]


class NetworkLayout(BaseModel):
    groups: list[NetworkGroup]


# ── Flow diagram ───────────────────────────────────────────────────────


class FlowNode(BaseModel):
    id: str
    name: str
    category: str
    style: str  # core / support / management / unknown
    column: int
    row: int
    x: float
    y: float
    width: float
    height: float
    center_x: float
    center_y: float
    label_lines: list[str]


class FlowConnector(_AliasModel):
    from_: str = Field(alias="from")
    to: str
    x1: float
    y1: float
    x2: float
    y2: float
    description: str | None = None


class FlowLayout(BaseModel):
    width: int
    height: int
    columns: int
    rows: int
    nodes: list[FlowNode] = []
    connectors: list[FlowConnector] = []
    skipped_connectors: int = 0


# ── Summary ────────────────────────────────────────────────────────────


class MapSummary(BaseModel):
    total_processes: int
    core: int
    support: int
    management: int
    interactions: int
