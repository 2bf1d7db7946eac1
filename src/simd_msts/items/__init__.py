from .base import StateItem
from .composite import AggregationItem
from .composite import CumulatorItem
from .composite import aggregation
from .composite import cumulator
from .leaf import ArItem
from .leaf import CycleItem
from .leaf import LocalLevelItem
from .leaf import LocalLinearTrendItem
from .leaf import NoiseItem
from .leaf import SarimaItem
from .leaf import SeasonalItem

__all__ = [
    "AggregationItem",
    "ArItem",
    "CumulatorItem",
    "CycleItem",
    "LocalLevelItem",
    "LocalLinearTrendItem",
    "NoiseItem",
    "SarimaItem",
    "SeasonalItem",
    "StateItem",
    "aggregation",
    "cumulator",
]
