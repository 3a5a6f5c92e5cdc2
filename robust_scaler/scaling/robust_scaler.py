from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple
import logging

import numpy as np
import pandas as pd

from ..errors import InputLengthError, require
from ..io.sklearn_params import SklearnScalerParams
from ..order_stats import OrderStatistics
from .config import ScalerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class _FittedState:
	"""Per-feature parameters, always replaced together."""
	center: np.ndarray
	scale: np.ndarray
	feature_names: Optional[Tuple[str, ...]] = None


def _readonly(a: np.ndarray) -> np.ndarray:
	a = np.array(a, dtype=np.float64, copy=True).reshape(-1)
	a.setflags(write=False)
	return a


@dataclass(eq=False)
class RobustScaler:
	"""
	Median/IQR scaler, parameter-compatible with scikit-learn's RobustScaler.

	• fit(X): center_ = per-column median, scale_ = max(Q(q_high) - Q(q_low), eps)
	• transform(X): (X - center_) / scale_ in float64, shape preserved
	• transform_1d(x): same affine map on one feature vector, returned as float32
	• load_external_parameters(src): adopt center_/scale_ exported by scikit-learn

	Shape and lifecycle misuse raises ContractViolation. Bad parameter files and
	wrong-length single rows raise DataFormatError subclasses.
	"""
	config: ScalerConfig = field(default_factory=ScalerConfig)
	_state: Optional[_FittedState] = field(default=None, init=False, repr=False)

	@property
	def center_(self) -> np.ndarray:
		if self._state is None:
			return np.empty(0, dtype=np.float64)
		return self._state.center

	@property
	def scale_(self) -> np.ndarray:
		if self._state is None:
			return np.empty(0, dtype=np.float64)
		return self._state.scale

	@property
	def feature_names_in_(self) -> Optional[Tuple[str, ...]]:
		if self._state is None:
			return None
		return self._state.feature_names

	def n_features(self) -> int:
		"""Number of features seen by the last fit/load; 0 before either."""
		return int(self.center_.shape[0])

	def is_fitted(self) -> bool:
		return self._state is not None

	@staticmethod
	def _as_matrix(X: Any) -> Tuple[np.ndarray, Optional[pd.DataFrame]]:
		"""Return (float64 2-D view/copy of X, X itself when it is a DataFrame)."""
		if isinstance(X, pd.DataFrame):
			return X.to_numpy(dtype=np.float64), X
		A = np.asarray(X, dtype=np.float64)
		require(A.ndim == 2, f"expected a 2-D feature matrix, got {A.ndim}-D input")
		return A, None

	def _check_ready(self, A: np.ndarray, frame: Optional[pd.DataFrame]) -> _FittedState:
		require(self._state is not None, "RobustScaler is not fitted; call fit() or load parameters first")
		st = self._state
		require(A.shape[1] == st.center.shape[0],
			f"X has {A.shape[1]} features but the scaler was fitted with {st.center.shape[0]}")
		if frame is not None and st.feature_names is not None:
			names = tuple(str(c) for c in frame.columns)
			require(names == st.feature_names,
				f"DataFrame columns {list(names)} differ from fitted features {list(st.feature_names)}")
		return st

	@staticmethod
	def _wrap(out: np.ndarray, frame: Optional[pd.DataFrame]):
		if frame is None:
			return out
		return pd.DataFrame(out, index=frame.index, columns=frame.columns)

	def fit(self, X: Any) -> "RobustScaler":
		A, frame = self._as_matrix(X)
		require(A.shape[0] > 0, "cannot fit on a matrix with no rows")
		n_features = A.shape[1]
		cfg = self.config

		center = np.empty(n_features, dtype=np.float64)
		scale = np.empty(n_features, dtype=np.float64)
		for j in range(n_features):
			col = A[:, j]
			center[j] = OrderStatistics.median(col)
			q1, q3 = OrderStatistics.quantiles(col, (cfg.q_low, cfg.q_high))
			scale[j] = max(q3 - q1, cfg.eps)

		names = None
		if frame is not None:
			names = tuple(str(c) for c in frame.columns)
		self._state = _FittedState(center=_readonly(center), scale=_readonly(scale), feature_names=names)
		floored = int(np.count_nonzero(scale <= cfg.eps))
		logger.debug("fitted RobustScaler on %d rows x %d features (%d at eps floor)",
			A.shape[0], n_features, floored)
		return self

	def transform(self, X: Any):
		"""Return (X - center_) / scale_; the input is left untouched."""
		A, frame = self._as_matrix(X)
		st = self._check_ready(A, frame)
		return self._wrap((A - st.center) / st.scale, frame)

	def inverse_transform(self, X: Any):
		"""Map scaled values back: X * scale_ + center_."""
		A, frame = self._as_matrix(X)
		st = self._check_ready(A, frame)
		return self._wrap(A * st.scale + st.center, frame)

	def fit_transform(self, X: Any):
		return self.fit(X).transform(X)

	def transform_1d(self, row: Any) -> np.ndarray:
		"""
		Scale one feature vector for single-sample inference.

		Arithmetic runs in float64; only the returned vector is narrowed to float32.
		A length mismatch raises InputLengthError since rows usually arrive from
		an untrusted request.
		"""
		require(self._state is not None, "RobustScaler is not fitted; call fit() or load parameters first")
		st = self._state
		x = np.asarray(row, dtype=np.float64)
		require(x.ndim <= 1, f"expected a single feature vector, got {x.ndim}-D input")
		x = x.reshape(-1)
		if x.shape[0] != st.center.shape[0]:
			raise InputLengthError(expected=st.center.shape[0], actual=x.shape[0])
		return ((x - st.center) / st.scale).astype(np.float32)

	def load_external_parameters(self, source: Any) -> "RobustScaler":
		"""
		Adopt center_/scale_ from a scikit-learn export (path, stream or mapping).

		On any DataFormatError the current parameters are kept as they were.
		"""
		params = SklearnScalerParams.read(source)
		self._state = _FittedState(center=_readonly(params.center), scale=_readonly(params.scale))
		logger.debug("loaded external RobustScaler parameters (%d features)", params.n_features_in)
		return self

	@classmethod
	def from_json(cls, source: Any, config: Optional[ScalerConfig] = None) -> "RobustScaler":
		"""Build a scaler directly from an exported parameter record."""
		scaler = cls() if config is None else cls(config=config)
		return scaler.load_external_parameters(source)

	def to_params(self) -> SklearnScalerParams:
		"""Export the fitted state in the same record format load_external_parameters reads."""
		require(self._state is not None, "RobustScaler is not fitted; nothing to export")
		st = self._state
		return SklearnScalerParams(center=st.center, scale=st.scale, n_features_in=int(st.center.shape[0]))
