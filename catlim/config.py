"""
catlim/config.py

Solver defaults, passed explicitly to limit() and colimit().
"""

from __future__ import annotations

from dataclasses import dataclass

from catlim.limits.joins import JoinAlgorithm


@dataclass(frozen=True)
class SolverConfig:
    """
    Attributes:
        join_algorithm: join used for multicospans and inside the recursive
                        solver when no algorithm is given
        tag_separator: separator between a name and its disambiguating
                       counter in named colimits ("x#1")
    """
    join_algorithm: JoinAlgorithm = JoinAlgorithm.SMART
    tag_separator: str = "#"

    def __post_init__(self):
        if not isinstance(self.join_algorithm, JoinAlgorithm):
            object.__setattr__(self, "join_algorithm", JoinAlgorithm(self.join_algorithm))
        if not self.tag_separator:
            raise ValueError("tag_separator must be non-empty")


DEFAULT_CONFIG = SolverConfig()
