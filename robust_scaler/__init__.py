"""
Public API
----------
median(x)                       -> float
quantile(x, q)                  -> float   (linear interpolation, q in [0, 1])
iqr(x, q_low=0.25, q_high=0.75) -> float

RobustScaler, ScalerConfig      -> estimator and its fitting knobs
SklearnScalerParams             -> scikit-learn parameter record (read/validate/write)

ContractViolation               -> caller misuse (shape, lifecycle, q range)
DataFormatError and subclasses  -> unreadable or inconsistent external data
"""

import logging

from .errors import (
	ContractViolation,
	DataFormatError,
	InputLengthError,
	ParameterParseError,
	ParameterReadError,
	ParameterValidationError,
)
from .order_stats import OrderStatistics
from .io import SklearnScalerParams
from .scaling import RobustScaler, ScalerConfig

logging.getLogger(__name__).addHandler(logging.NullHandler())

median = OrderStatistics.median
quantile = OrderStatistics.quantile
iqr = OrderStatistics.iqr

__all__ = [
	"OrderStatistics", "median", "quantile", "iqr",
	"RobustScaler", "ScalerConfig", "SklearnScalerParams",
	"ContractViolation", "DataFormatError", "InputLengthError",
	"ParameterParseError", "ParameterReadError", "ParameterValidationError",
]
