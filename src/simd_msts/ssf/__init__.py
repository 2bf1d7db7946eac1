from .component import BlockLoading
from .component import CompositeComponent
from .component import DIFFUSE_VARIANCE
from .component import Loading
from .component import StateComponent
from .component import SumLoading
from .cumulator import CumulatorComponent
from .cumulator import CumulatorLoading
from .cumulator import cumulator
from .cumulator import cumulator_loading

__all__ = [
    "BlockLoading",
    "CompositeComponent",
    "CumulatorComponent",
    "CumulatorLoading",
    "DIFFUSE_VARIANCE",
    "Loading",
    "StateComponent",
    "SumLoading",
    "cumulator",
    "cumulator_loading",
]
