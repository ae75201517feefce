from process_mapper.models.base import Base
from process_mapper.models.process_map_report import ProcessMapReport

__all__ = [
    "Base",
    "ProcessMapReport",
]
