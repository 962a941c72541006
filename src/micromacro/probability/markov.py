from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from micromacro.errors import EmptyRow
from micromacro.probability.distribution import Distribution

logger = logging.getLogger("micromacro.markov")


@dataclass(frozen=True)
class StationaryResult:
    distribution: Distribution
    iterations: int
    converged: bool


class MarkovKernel:
    """
    Row-normalized transition kernel between two labelled sets.

    Rows sum to one, or to zero for rows without outgoing mass when the
    kernel was built non-strictly (row-substochastic).
    """

    def __init__(self, rows: List[str], cols: List[str], matrix: np.ndarray) -> None:
        self.rows = list(rows)
        self.cols = list(cols)
        self.matrix = np.asarray(matrix, dtype=np.float64)

    @classmethod
    def from_edges(
        cls,
        rows: List[str],
        cols: List[str],
        edges: Iterable[Tuple[str, str, float]],
        *,
        strict: bool = True,
    ) -> "MarkovKernel":
        """
        Build a kernel from ``(row, col, weight)`` triples.

        Parallel triples accumulate. With ``strict`` every row must carry
        positive mass, otherwise ``EmptyRow`` is raised; without it such
        rows stay zero.
        """
        row_ix = {label: i for i, label in enumerate(rows)}
        col_ix = {label: j for j, label in enumerate(cols)}
        raw = np.zeros((len(rows), len(cols)), dtype=np.float64)

        for r, c, w in edges:
            if w < 0.0:
                raise ValueError(f"negative weight on {r!r} -> {c!r}")
            if r not in row_ix or c not in col_ix:
                raise ValueError(f"edge {r!r} -> {c!r} references an unknown label")
            raw[row_ix[r], col_ix[c]] += float(w)

        sums = raw.sum(axis=1)
        if strict:
            for i, s in enumerate(sums):
                if s <= 0.0:
                    raise EmptyRow(rows[i])

        matrix = np.divide(
            raw,
            sums[:, None],
            out=np.zeros_like(raw),
            where=sums[:, None] > 0.0,
        )
        return cls(rows, cols, matrix)

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    def push(self, distribution: Distribution) -> np.ndarray:
        """
        Vector-matrix product ``p . K`` aligned by row labels.
        """
        return distribution.aligned(self.rows) @ self.matrix

    def stationary(
        self,
        initial: Distribution,
        *,
        tolerance: float,
        max_iterations: int,
    ) -> StationaryResult:
        """
        Power iteration from ``initial`` until successive iterates differ
        by less than ``tolerance`` in every component.
        """
        if not self.is_square:
            raise ValueError("stationary distribution needs a square kernel")

        current = initial.aligned(self.rows)
        for iteration in range(1, max_iterations + 1):
            nxt = current @ self.matrix
            if float(np.max(np.abs(nxt - current), initial=0.0)) < tolerance:
                return StationaryResult(Distribution(self.rows, nxt), iteration, True)
            current = nxt

        logger.debug(
            "power iteration did not converge after %s iterations",
            max_iterations,
        )
        return StationaryResult(Distribution(self.rows, current), max_iterations, False)

    # ------------------------------------------------------------------
    # Chain statistics
    # ------------------------------------------------------------------

    def entropy_rate(self, stationary: Distribution) -> float:
        """
        -sum_i pi_i sum_j K_ij ln K_ij
        """
        pi = stationary.aligned(self.rows)
        total = 0.0
        for i, p in enumerate(pi):
            if p <= 0.0:
                continue
            row = self.matrix[i]
            positive = row[row > 0.0]
            total += p * float(np.sum(positive * np.log(positive)))
        return -total

    def detailed_balance_deviation(self, stationary: Distribution) -> float:
        """
        1/2 sum_ij |pi_i K_ij - pi_j K_ji|
        """
        if not self.is_square:
            raise ValueError("detailed balance needs a square kernel")
        pi = stationary.aligned(self.rows)
        flow = pi[:, None] * self.matrix
        return float(np.abs(flow - flow.T).sum() / 2.0)
