"""
Persistence boundary for micromacro.

Only the data shape is defined here; reading and writing files is left
to the caller.
"""

from micromacro.persistence.records import (
    StateNodeRecord,
    StateEdgeRecord,
    MappingNodeRecord,
    MappingEdgeRecord,
    ProjectRecord,
)
from micromacro.persistence.project_io import export_project, build_graphs

__all__ = [
    "StateNodeRecord",
    "StateEdgeRecord",
    "MappingNodeRecord",
    "MappingEdgeRecord",
    "ProjectRecord",
    "export_project",
    "build_graphs",
]
