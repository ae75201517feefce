"""Process map data model.

A ``ProcessMap`` is the aggregate the whole engine works on: an ordered list
of processes (insertion order is display order) and the directed interactions
between them, joined by process *name*.  JSON output uses the camelCase field
names the exporters and the browser client expect (``isoClauses``,
``processFlow``, ``from``).
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from process_mapper.core.errors import DuplicateProcessNameError, ProcessNotFoundError

DEFAULT_RISK = "Process failure risk"
DEFAULT_KPI = "Process performance metric"
DEFAULT_ISO_CLAUSES = ["8.1", "8.2", "9.1"]


def default_owner(name: str) -> str:
    return f"{name} Manager"


def default_inputs(name: str) -> list[str]:
    return [f"{name} inputs", "Requirements", "Resources"]


def default_outputs(name: str) -> list[str]:
    return [f"{name} outputs", "Deliverables", "Reports"]


class ProcessCategory(str, enum.Enum):
    CORE = "core"
    SUPPORT = "support"
    MANAGEMENT = "management"


# Display order for every grouped view: oversight on top, support underneath.
CATEGORY_ORDER = (ProcessCategory.MANAGEMENT, ProcessCategory.CORE, ProcessCategory.SUPPORT)


class Process(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = Field(min_length=1)
    category: ProcessCategory = ProcessCategory.CORE
    inputs: list[str] = []
    outputs: list[str] = []
    risk: str = DEFAULT_RISK
    kpi: str = DEFAULT_KPI
    owner: str = ""
    iso_clauses: list[str] = Field(default_factory=lambda: list(DEFAULT_ISO_CLAUSES), alias="isoClauses")


class Interaction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    description: str | None = None


class SupportingFlow(BaseModel):
    name: str
    processes: list[str] = []


class FeedbackLoop(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    description: str = ""


class ProcessFlow(BaseModel):
    """Denormalized summary of a map. Derived, never authoritative."""

    model_config = ConfigDict(populate_by_name=True)

    primary_flow: list[str] = Field(default=[], alias="primaryFlow")
    supporting_flows: list[SupportingFlow] = Field(default=[], alias="supportingFlows")
    feedback_loops: list[FeedbackLoop] = Field(default=[], alias="feedbackLoops")


class ProcessCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    category: ProcessCategory = ProcessCategory.CORE
    inputs: list[str] | None = None
    outputs: list[str] | None = None
    risk: str | None = None
    kpi: str | None = None
    owner: str | None = None
    iso_clauses: list[str] | None = Field(default=None, alias="isoClauses")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Process name must not be blank")
        return v


class ProcessUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    category: ProcessCategory | None = None
    inputs: list[str] | None = None
    outputs: list[str] | None = None
    risk: str | None = None
    kpi: str | None = None
    owner: str | None = None
    iso_clauses: list[str] | None = Field(default=None, alias="isoClauses")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Process name must not be blank")
        return v


class ProcessMap(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    processes: list[Process] = []
    interactions: list[Interaction] = []
    process_flow: ProcessFlow | None = Field(default=None, alias="processFlow")
    # Next id to hand out; ids are never reused after a delete.
    next_id: int = Field(default=1, exclude=True)

    @classmethod
    def from_processes(
        cls,
        processes: list[Process],
        interactions: list[Interaction] | None = None,
        process_flow: ProcessFlow | None = None,
    ) -> ProcessMap:
        numeric_ids = [int(p.id) for p in processes if p.id.isascii() and p.id.isdigit()]
        next_id = max(max(numeric_ids, default=0), len(processes)) + 1
        return cls(
            processes=processes,
            interactions=interactions or [],
            process_flow=process_flow,
            next_id=next_id,
        )

    # ── lookups ──────────────────────────────────────────────────────

    def find_by_id(self, process_id: str) -> Process | None:
        for p in self.processes:
            if p.id == process_id:
                return p
        return None

    def find_by_name(self, name: str) -> Process | None:
        for p in self.processes:
            if p.name == name:
                return p
        return None

    def _require(self, process_id: str) -> Process:
        process = self.find_by_id(process_id)
        if process is None:
            raise ProcessNotFoundError(f"Process {process_id} not found")
        return process

    def _allocate_id(self) -> str:
        used = {p.id for p in self.processes}
        while str(self.next_id) in used:
            self.next_id += 1
        new_id = str(self.next_id)
        self.next_id += 1
        return new_id

    # ── edits ────────────────────────────────────────────────────────

    def add_process(self, data: ProcessCreate) -> Process:
        if self.find_by_name(data.name) is not None:
            raise DuplicateProcessNameError(f"A process named '{data.name}' already exists")
        process = Process(
            id=self._allocate_id(),
            name=data.name,
            category=data.category,
            inputs=data.inputs if data.inputs else default_inputs(data.name),
            outputs=data.outputs if data.outputs else default_outputs(data.name),
            risk=data.risk or DEFAULT_RISK,
            kpi=data.kpi or DEFAULT_KPI,
            owner=data.owner or default_owner(data.name),
            iso_clauses=data.iso_clauses or list(DEFAULT_ISO_CLAUSES),
        )
        self.processes.append(process)
        return process

    def update_process(self, process_id: str, data: ProcessUpdate) -> Process:
        process = self._require(process_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        new_name = changes.get("name")
        if new_name is not None and new_name != process.name:
            clash = self.find_by_name(new_name)
            if clash is not None and clash.id != process.id:
                raise DuplicateProcessNameError(f"A process named '{new_name}' already exists")
            # Interactions join on name; keep edges attached across a rename.
            for interaction in self.interactions:
                if interaction.from_ == process.name:
                    interaction.from_ = new_name
                if interaction.to == process.name:
                    interaction.to = new_name

        for field, value in changes.items():
            setattr(process, field, value)
        return process

    def delete_process(self, process_id: str) -> Process:
        process = self._require(process_id)
        self.processes = [p for p in self.processes if p.id != process_id]
        self.interactions = [
            i for i in self.interactions if i.from_ != process.name and i.to != process.name
        ]
        return process

    # ── views ────────────────────────────────────────────────────────

    def by_category(self, category: ProcessCategory) -> list[Process]:
        return [p for p in self.processes if p.category == category]

    def to_export_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
