from .bounded import BoundedParameterInterpreter
from .polynomial import StablePolynomialInterpreter
from .polynomial import check_stability
from .polynomial import stabilize
from .sarima import SarimaInterpreter
from .sarima import SarimaMapping
from .sarima import SarimaOrders
from .variance import VarianceInterpreter

__all__ = [
    "BoundedParameterInterpreter",
    "StablePolynomialInterpreter",
    "SarimaInterpreter",
    "SarimaMapping",
    "SarimaOrders",
    "VarianceInterpreter",
    "check_stability",
    "stabilize",
]
