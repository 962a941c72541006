from __future__ import annotations

import math
from typing import Dict, Iterable, List, Literal, Optional, Tuple

import numpy as np

from micromacro.errors import AllZeroWeight, EmptyStateGraph


class Distribution:
    """
    Probability vector indexed by string labels.

    Values are float64 and sum to one. Label order is preserved from
    construction so that results stay deterministic.
    """

    def __init__(self, labels: List[str], values: np.ndarray) -> None:
        if len(labels) != len(values):
            raise ValueError("labels and values differ in length")
        self.labels = list(labels)
        self.values = np.asarray(values, dtype=np.float64)
        self._index = {label: i for i, label in enumerate(self.labels)}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_weights(
        cls,
        weights: Iterable[Tuple[str, float]],
        *,
        zero_weight_policy: Literal["error", "uniform"] = "error",
    ) -> "Distribution":
        """
        Normalize non-negative weights into a distribution.

        Raises ``EmptyStateGraph`` for no weights and, under the
        ``"error"`` policy, ``AllZeroWeight`` when they sum to zero.
        """
        pairs = list(weights)
        if not pairs:
            raise EmptyStateGraph()

        labels = [label for label, _ in pairs]
        values = np.array([w for _, w in pairs], dtype=np.float64)

        if np.any(values < 0.0):
            raise ValueError("weights must be non-negative")

        total = float(values.sum())
        if total == 0.0:
            if zero_weight_policy == "uniform":
                return cls.uniform(labels)
            raise AllZeroWeight()

        return cls(labels, values / total)

    @classmethod
    def uniform(cls, labels: Iterable[str]) -> "Distribution":
        labels = list(labels)
        if not labels:
            raise EmptyStateGraph()
        return cls(labels, np.full(len(labels), 1.0 / len(labels)))

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.labels)

    def get(self, label: str) -> Optional[float]:
        i = self._index.get(label)
        if i is None:
            return None
        return float(self.values[i])

    def items(self) -> List[Tuple[str, float]]:
        return [(label, float(v)) for label, v in zip(self.labels, self.values)]

    def as_dict(self) -> Dict[str, float]:
        return dict(self.items())

    def aligned(self, labels: List[str]) -> np.ndarray:
        """
        Values re-ordered to ``labels``; unknown labels get zero mass.
        """
        out = np.zeros(len(labels), dtype=np.float64)
        for j, label in enumerate(labels):
            i = self._index.get(label)
            if i is not None:
                out[j] = self.values[i]
        return out

    # ------------------------------------------------------------------
    # Information measures
    # ------------------------------------------------------------------

    def entropy(self) -> float:
        """
        Shannon entropy in nats.
        """
        entropy = 0.0
        for p in self.values:
            if p > 0.0:
                entropy -= p * math.log(p)
        return float(entropy)

    def effective_states(self) -> float:
        return math.exp(self.entropy())
