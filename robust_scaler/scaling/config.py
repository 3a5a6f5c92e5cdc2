"""
Fitting configuration for RobustScaler.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..errors import require


@dataclass(frozen=True)
class ScalerConfig:
	"""
	Quantile range and spread floor.

	q_low/q_high : fractions bracketing the spread (0.25/0.75 -> IQR)
	eps          : lower bound on every fitted scale, so constant columns divide safely
	"""
	q_low: float = 0.25
	q_high: float = 0.75
	eps: float = 1e-8

	def __post_init__(self) -> None:
		require(0.0 <= self.q_low < self.q_high <= 1.0,
			f"quantile range must satisfy 0 <= q_low < q_high <= 1, got ({self.q_low}, {self.q_high})")
		require(self.eps > 0.0, f"eps must be positive, got {self.eps}")
