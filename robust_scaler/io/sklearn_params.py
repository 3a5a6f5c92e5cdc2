"""Reader and writer for RobustScaler parameters exported by scikit-learn.

Record layout (JSON object):
  • center_        : list of per-feature medians
  • scale_         : list of per-feature spreads (IQR)
  • n_features_in_ : feature count; must equal both list lengths

Validation happens before anything is handed to an estimator, so a bad file
never leaves a scaler half-loaded.
"""

from __future__ import annotations
from dataclasses import dataclass
from numbers import Integral, Real
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple
import json
import logging
import os

import numpy as np

from ..errors import ParameterParseError, ParameterReadError, ParameterValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: Tuple[str, ...] = ("center_", "scale_", "n_features_in_")


@dataclass(frozen=True, eq=False)
class SklearnScalerParams:
	"""
	Validated, immutable parameter record.

	center and scale are read-only float64 arrays of length n_features_in.
	"""
	center: np.ndarray
	scale: np.ndarray
	n_features_in: int

	@staticmethod
	def _as_vector(obj: Mapping[str, Any], key: str, n: int) -> np.ndarray:
		"""Coerce obj[key] to a finite float64 vector of length n or raise ParameterValidationError."""
		raw = obj[key]
		if isinstance(raw, np.ndarray) and raw.ndim != 1:
			raise ParameterValidationError(key, "must be a flat list of numbers",
				expected="1-D", actual=f"{raw.ndim}-D array")
		if isinstance(raw, (str, bytes, Mapping)) or not hasattr(raw, "__len__"):
			raise ParameterValidationError(key, "must be a list of numbers",
				expected="list", actual=type(raw).__name__)
		values = list(raw)
		if len(values) != n:
			raise ParameterValidationError(key, "length does not match 'n_features_in_'",
				expected=n, actual=len(values))
		for j, v in enumerate(values):
			if isinstance(v, bool) or not isinstance(v, Real):
				raise ParameterValidationError(key, f"entry {j} is not a number",
					expected="float", actual=type(v).__name__)
		arr = np.asarray(values, dtype=np.float64).reshape(-1)
		if not np.all(np.isfinite(arr)):
			bad = int(np.flatnonzero(~np.isfinite(arr))[0])
			raise ParameterValidationError(key, f"entry {bad} is not finite",
				expected="finite float", actual=float(arr[bad]))
		arr.setflags(write=False)
		return arr

	@staticmethod
	def from_mapping(obj: Any) -> "SklearnScalerParams":
		"""
		Validate a decoded record and build the parameter object.

		Extra keys are tolerated (scikit-learn exports may carry feature_names_in_
		and similar); missing or inconsistent required keys are not.
		"""
		if not isinstance(obj, Mapping):
			raise ParameterValidationError("<root>", "record must be a JSON object",
				expected="object", actual=type(obj).__name__)
		for key in REQUIRED_FIELDS:
			if key not in obj:
				raise ParameterValidationError(key, "missing required field")
		extra = sorted(str(k) for k in obj.keys() if k not in REQUIRED_FIELDS)
		if extra:
			logger.debug("ignoring extra scaler parameter fields: %s", extra)

		n_raw = obj["n_features_in_"]
		if isinstance(n_raw, bool) or not isinstance(n_raw, Integral):
			raise ParameterValidationError("n_features_in_", "must be an integer",
				expected="int", actual=type(n_raw).__name__)
		n = int(n_raw)
		if n < 0:
			raise ParameterValidationError("n_features_in_", "must be non-negative",
				expected=">= 0", actual=n)

		center = SklearnScalerParams._as_vector(obj, "center_", n)
		scale = SklearnScalerParams._as_vector(obj, "scale_", n)
		if np.any(scale == 0.0):
			bad = int(np.flatnonzero(scale == 0.0)[0])
			raise ParameterValidationError("scale_", f"entry {bad} is zero",
				expected="non-zero float", actual=0.0)
		return SklearnScalerParams(center=center, scale=scale, n_features_in=n)

	@staticmethod
	def _decode(text: Any, label: str) -> Any:
		"""Decode bytes as UTF-8 (BOM tolerated) and parse JSON, mapping failures onto the error taxonomy."""
		if isinstance(text, (bytes, bytearray)):
			try:
				text = bytes(text).decode("utf-8-sig")
			except UnicodeDecodeError as e:
				raise ParameterReadError(label, f"not UTF-8 text ({e})") from e
		if not isinstance(text, str):
			raise ParameterReadError(label, f"stream returned {type(text).__name__}, expected text or bytes")
		if text.startswith("\ufeff"):
			text = text[1:]
		try:
			return json.loads(text)
		except json.JSONDecodeError as e:
			raise ParameterParseError(label, str(e)) from e

	@staticmethod
	def read(source: Any) -> "SklearnScalerParams":
		"""
		Read and validate a record from a path, a readable stream, or a decoded mapping.

		Paths are opened and closed here; streams stay owned by the caller.
		"""
		if isinstance(source, Mapping):
			return SklearnScalerParams.from_mapping(source)

		if isinstance(source, (str, os.PathLike)):
			path = Path(source)
			label = str(path)
			try:
				with path.open("rb") as f:
					payload = f.read()
			except OSError as e:
				raise ParameterReadError(label, e.strerror or str(e)) from e
		elif hasattr(source, "read"):
			label = str(getattr(source, "name", "<stream>"))
			try:
				payload = source.read()
			except (OSError, ValueError) as e:
				raise ParameterReadError(label, str(e)) from e
		else:
			raise ParameterReadError(repr(source), "expected a path, a readable stream or a mapping")

		obj = SklearnScalerParams._decode(payload, label)
		params = SklearnScalerParams.from_mapping(obj)
		logger.debug("read scaler parameters from %s (n_features_in_=%d)", label, params.n_features_in)
		return params

	def to_dict(self) -> Dict[str, object]:
		"""Return the record as plain Python types in the exported field names."""
		return {
			"center_": [float(v) for v in self.center],
			"scale_": [float(v) for v in self.scale],
			"n_features_in_": int(self.n_features_in),
		}

	def to_json(self) -> str:
		"""Return a stable JSON representation with sorted keys."""
		return json.dumps(self.to_dict(), sort_keys=True, ensure_ascii=False, separators=(",", ":"))

	def write(self, path: Path) -> None:
		"""Write the JSON record to 'path', creating parent directories as needed."""
		path = Path(path)
		path.parent.mkdir(parents=True, exist_ok=True)
		with path.open("w", encoding="utf-8") as f:
			f.write(self.to_json())
