"""Weight-unit conversion of troy-ounce prices."""
from collections.abc import Iterable

from gold_monitor.catalog import find_unit
from gold_monitor.schemas import ChartPoint, Unit


def convert(base_price: float, unit: Unit | str) -> float:
    """Price of one ``unit`` given the price of one troy ounce.

    Unknown unit codes fall back to the troy ounce.
    """
    if isinstance(unit, str):
        unit = find_unit(unit)
    return base_price * unit.multiplier


def convert_series(points: Iterable[ChartPoint], unit: Unit | str) -> list[ChartPoint]:
    if isinstance(unit, str):
        unit = find_unit(unit)
    return [ChartPoint(p.timestamp_ms, convert(p.price, unit)) for p in points]
