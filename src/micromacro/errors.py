from __future__ import annotations


class MicroMacroError(Exception):
    """
    Base class for every error raised by micromacro.
    """


# ---------------------------------------------------------------------
# Persisted data
# ---------------------------------------------------------------------


class ValidationError(MicroMacroError):
    """
    Persisted project data is malformed.

    Raised by import before any graph is replaced.
    """


# ---------------------------------------------------------------------
# Mutation boundary
# ---------------------------------------------------------------------


class StructuralError(MicroMacroError):
    """
    A mutation would violate a structural invariant.

    Always raised before the store is touched.
    """


class UnknownNodeError(StructuralError):
    def __init__(self, graph: str, node_id: str) -> None:
        super().__init__(f"{graph} graph has no node {node_id!r}")
        self.graph = graph
        self.node_id = node_id


class KindMismatchError(StructuralError):
    """
    Mapping edges must run from a Source node to a Destination node.
    """


class DuplicateNameError(StructuralError):
    def __init__(self, graph: str, name: str) -> None:
        super().__init__(f"{graph} graph already has a node named {name!r}")
        self.graph = graph
        self.name = name


class InvalidWeightError(StructuralError):
    pass


# ---------------------------------------------------------------------
# Probability computation
# ---------------------------------------------------------------------


class ComputationError(MicroMacroError):
    """
    Derived weights could not be computed from the current graphs.
    """


class EmptyStateGraph(ComputationError):
    def __init__(self) -> None:
        super().__init__("state graph is empty")


class AllZeroWeight(ComputationError):
    def __init__(self) -> None:
        super().__init__("state weights sum to zero; cannot normalize")


class InconsistentMapping(ComputationError):
    def __init__(self, source_id: str) -> None:
        super().__init__(
            f"mapping edge source {source_id!r} has no state node"
        )
        self.source_id = source_id


class EmptyRow(ComputationError):
    def __init__(self, label: str) -> None:
        super().__init__(f"row {label!r} has zero total weight")
        self.label = label
