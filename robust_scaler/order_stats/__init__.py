from .kernel import OrderStatistics


median = OrderStatistics.median
quantile = OrderStatistics.quantile
quantiles = OrderStatistics.quantiles
iqr = OrderStatistics.iqr

__all__ = ["OrderStatistics", "median", "quantile", "quantiles", "iqr"]
