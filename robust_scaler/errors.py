"""
Error taxonomy shared by the kernel, the estimator and the parameter reader.

Two families, never mixed:

  • ContractViolation   : caller misuse (wrong shape, q outside [0, 1], transform
                          before fit). Not meant to be caught and recovered from.
  • DataFormatError     : data crossing a trust boundary is unreadable or
                          inconsistent (parameter files, live single-row inputs).
                          Subclasses carry enough context to diagnose the input
                          without re-parsing it.
"""

from __future__ import annotations
from typing import Optional


class ContractViolation(AssertionError):
	"""Raised when a caller breaks a precondition of the kernel or the estimator."""


def require(cond: bool, msg: str) -> None:
	"""Raise ContractViolation(msg) unless 'cond' holds; unaffected by python -O."""
	if not cond:
		raise ContractViolation(msg)


class DataFormatError(ValueError):
	"""Base class for recoverable errors about externally supplied data."""


class ParameterReadError(DataFormatError):
	"""The parameter source could not be opened, read or decoded."""

	def __init__(self, source: str, reason: str) -> None:
		self.source = source
		self.reason = reason
		super().__init__(f"cannot read scaler parameters from {source}: {reason}")


class ParameterParseError(DataFormatError):
	"""The parameter source was read but is not valid JSON."""

	def __init__(self, source: str, reason: str) -> None:
		self.source = source
		self.reason = reason
		super().__init__(f"scaler parameters in {source} are not valid JSON: {reason}")


class ParameterValidationError(DataFormatError):
	"""
	The parameter record parsed but is structurally inconsistent.

	'field' names the offending key; 'expected'/'actual' hold the values that
	disagreed (lengths for sequence fields, type names for type errors).
	"""

	def __init__(
		self,
		field: str,
		message: str,
		expected: Optional[object] = None,
		actual: Optional[object] = None,
	) -> None:
		self.field = field
		self.expected = expected
		self.actual = actual
		detail = message
		if expected is not None or actual is not None:
			detail = f"{message} (expected {expected}, got {actual})"
		super().__init__(f"invalid '{field}': {detail}")


class InputLengthError(DataFormatError):
	"""A single feature vector does not have the fitted number of features."""

	def __init__(self, expected: int, actual: int) -> None:
		self.expected = int(expected)
		self.actual = int(actual)
		super().__init__(
			f"input has {self.actual} features but the scaler was fitted with {self.expected}"
		)
