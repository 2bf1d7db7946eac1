"""Construction of state items from configuration.

Item kinds are looked up in an :class:`ItemRegistry`. The registry is
shared by the whole process: writers serialise on a lock and swap in a
new read-only table, readers use whatever table is current.
"""
import logging
import threading
from types import MappingProxyType

from .items import AggregationItem
from .items import ArItem
from .items import CumulatorItem
from .items import CycleItem
from .items import LocalLevelItem
from .items import LocalLinearTrendItem
from .items import NoiseItem
from .items import SarimaItem
from .items import SeasonalItem
from .mapping import MstsMapping
from .parameters import SarimaOrders

logger = logging.getLogger(__name__)


class ItemRegistry:
    def __init__(self, factories=None):
        self._lock = threading.Lock()
        self._factories = MappingProxyType(dict(factories or {}))

    def register(self, kind, factory, replace=False):
        with self._lock:
            if kind in self._factories and not replace:
                raise ValueError("Item kind {!r} is already registered".format(kind))
            self._factories = MappingProxyType({**self._factories, kind: factory})
        logger.info("Registered item kind %r", kind)

    def kinds(self):
        return tuple(sorted(self._factories))

    def create(self, kind, name, **options):
        factories = self._factories
        try:
            factory = factories[kind]
        except KeyError:
            raise ValueError(
                "Unknown item kind {!r}. Available: {}".format(kind, sorted(factories))
            ) from None
        return factory(name, **options)


def _sarima(name, orders, **options):
    if not isinstance(orders, SarimaOrders):
        orders = SarimaOrders(**orders)
    return SarimaItem(name, orders, **options)


DEFAULT_REGISTRY = ItemRegistry(
    {
        "noise": NoiseItem,
        "level": LocalLevelItem,
        "llt": LocalLinearTrendItem,
        "seasonal": SeasonalItem,
        "cycle": CycleItem,
        "ar": ArItem,
        "sarima": _sarima,
        "cumulator": CumulatorItem,
        "aggregation": AggregationItem,
    }
)


def item_from_config(spec, registry=None):
    """Build one item from a dict such as
    ``{"kind": "cycle", "name": "c", "factor": 0.8, "period": 20, "var": 1}``.

    Composite kinds take their inner items as nested dicts under ``core``
    (cumulator) or ``items`` (aggregation).
    """
    registry = registry or DEFAULT_REGISTRY
    spec = dict(spec)
    try:
        kind = spec.pop("kind")
        name = spec.pop("name")
    except KeyError as e:
        raise ValueError("Item spec {!r} is missing {}".format(spec, e)) from None
    if "core" in spec:
        spec["core"] = item_from_config(spec["core"], registry)
    if "items" in spec:
        spec["items"] = [item_from_config(s, registry) for s in spec["items"]]
    return registry.create(kind, name, **spec)


def items_from_config(config, registry=None):
    return [item_from_config(spec, registry) for spec in config]


def structural_model(
    level=True,
    trend=False,
    seasonal=None,
    cycle=False,
    autoregressive=None,
    irregular=True,
    stochastic_level=True,
    stochastic_trend=True,
    stochastic_seasonal=True,
    stochastic_cycle=True,
    cycle_factor=0.9,
    cycle_period=8.0,
    variance=1.0,
    registry=None,
):
    """Items of a basic structural model.

    A component that isn't stochastic gets its variance fixed at 0.
    """
    registry = registry or DEFAULT_REGISTRY

    if trend and not level:
        raise ValueError("A trend needs a level")

    def var(stochastic):
        return dict(var=variance if stochastic else 0.0, fixed=not stochastic)

    items = []
    if level and trend:
        items.append(
            registry.create(
                "llt",
                "llt",
                level_var=variance if stochastic_level else 0.0,
                slope_var=variance if stochastic_trend else 0.0,
                fixed_level=not stochastic_level,
                fixed_slope=not stochastic_trend,
            )
        )
    elif level:
        items.append(registry.create("level", "l", **var(stochastic_level)))
    if seasonal:
        items.append(
            registry.create("seasonal", "seas", period=seasonal, **var(stochastic_seasonal))
        )
    if cycle:
        items.append(
            registry.create(
                "cycle",
                "cycle",
                factor=cycle_factor,
                period=cycle_period,
                var=variance if stochastic_cycle else 0.0,
                fixed_var=not stochastic_cycle,
            )
        )
    if autoregressive:
        items.append(
            registry.create("ar", "ar", ar=[0.0] * autoregressive, var=variance)
        )
    if irregular:
        items.append(registry.create("noise", "noise", var=variance))
    return items


def structural_mapping(obs_cov=0.0, **kwargs):
    return MstsMapping.of(*structural_model(**kwargs), obs_cov=obs_cov)
