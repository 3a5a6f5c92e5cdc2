from .config import ScalerConfig
from .robust_scaler import RobustScaler

__all__ = ["ScalerConfig", "RobustScaler"]
