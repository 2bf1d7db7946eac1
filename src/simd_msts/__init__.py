from simd_msts.items import aggregation
from simd_msts.items import cumulator
from simd_msts.mapping import MstsMapping
from simd_msts.model import CompositeModel
from simd_msts.model import ModelBuilder

__all__ = [
    "MstsMapping",
    "ModelBuilder",
    "CompositeModel",
    "aggregation",
    "cumulator",
]
