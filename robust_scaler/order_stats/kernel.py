from __future__ import annotations
from typing import Tuple
import numpy as np

from ..errors import require

"""
OrderStatistics
---------------
Stateless order statistics over a finite 1-D sample:

  • median(x)             : middle element, or mean of the two middle elements
  • quantile(x, q)        : linear interpolation between bracketing order statistics
  • iqr(x, q_low, q_high) : quantile(q_high) - quantile(q_low) over one sort

The interpolation rule is rank = q * (n - 1), i = floor(rank), t = rank - i,
value = s[i] + t * (s[i+1] - s[i]), with the top rank pinned to max(x). This is
NumPy's default ("linear") quantile, which is what scikit-learn's RobustScaler
uses, so parameters fitted here and there agree numerically.

Inputs are copied and sorted privately; callers' buffers are never reordered.
NaN is not a supported input.
"""


class OrderStatistics:
	@staticmethod
	def _sorted(values) -> np.ndarray:
		"""Return a sorted float64 copy of a non-empty 1-D sample."""
		a = np.array(values, dtype=np.float64)
		require(a.ndim <= 1, f"order statistics need a 1-D sample, got {a.ndim}-D input")
		a = a.reshape(-1)
		require(a.shape[0] > 0, "order statistics need a non-empty sample")
		a.sort(kind="stable")
		return a

	@staticmethod
	def _interpolate(s: np.ndarray, q: float) -> float:
		"""Linear-interpolation quantile of an already sorted sample."""
		n = s.shape[0]
		rank = float(q) * float(n - 1)
		i = int(np.floor(rank))
		t = rank - float(i)
		if i >= n - 1:
			return float(s[n - 1])
		lo = float(s[i])
		hi = float(s[i + 1])
		return lo + t * (hi - lo)

	@staticmethod
	def median(values) -> float:
		"""
		Classical median: s[n//2] for odd n, (s[n/2 - 1] + s[n/2]) / 2 for even n.
		"""
		s = OrderStatistics._sorted(values)
		n = s.shape[0]
		mid = n // 2
		if n % 2 == 0:
			return (float(s[mid - 1]) + float(s[mid])) / 2.0
		return float(s[mid])

	@staticmethod
	def quantile(values, q: float) -> float:
		"""
		Quantile of 'values' at fraction q in [0, 1] by linear interpolation.

		quantile(x, 0.0) == min(x) and quantile(x, 1.0) == max(x) exactly.
		"""
		require(0.0 <= float(q) <= 1.0, f"quantile fraction must lie in [0, 1], got {q!r}")
		return OrderStatistics._interpolate(OrderStatistics._sorted(values), q)

	@staticmethod
	def quantiles(values, qs: Tuple[float, ...]) -> Tuple[float, ...]:
		"""Several quantiles of the same sample, sorting it once."""
		for q in qs:
			require(0.0 <= float(q) <= 1.0, f"quantile fraction must lie in [0, 1], got {q!r}")
		s = OrderStatistics._sorted(values)
		return tuple(OrderStatistics._interpolate(s, q) for q in qs)

	@staticmethod
	def iqr(values, q_low: float = 0.25, q_high: float = 0.75) -> float:
		"""Spread between the q_high and q_low quantiles (the interquartile range by default)."""
		require(float(q_low) <= float(q_high), f"q_low={q_low!r} exceeds q_high={q_high!r}")
		lo, hi = OrderStatistics.quantiles(values, (q_low, q_high))
		return hi - lo
