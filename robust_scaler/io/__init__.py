from .sklearn_params import SklearnScalerParams, REQUIRED_FIELDS

__all__ = ["SklearnScalerParams", "REQUIRED_FIELDS"]
