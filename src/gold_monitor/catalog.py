"""Fixed lookup tables for sources, currencies, weight units and chart ranges.

Every lookup is case-insensitive and falls back to the first entry of its
table instead of failing.
"""
from gold_monitor.schemas import Currency, RangeSelector, SliceMode, Source, Unit

GRAMS_PER_TROY_OUNCE = 31.1034768

SOURCES: tuple[Source, ...] = (
    Source(id="pax-gold", name="PAX Gold (Paxos)", symbol="PAXG"),
    Source(id="tether-gold", name="Tether Gold", symbol="XAUt"),
)

CURRENCIES: tuple[Currency, ...] = (
    Currency(code="USD", symbol="$", name="US Dollar"),
    Currency(code="HKD", symbol="HK$", name="Hong Kong Dollar"),
    Currency(code="EUR", symbol="€", name="Euro"),
    Currency(code="JPY", symbol="¥", name="Japanese Yen"),
    Currency(code="GBP", symbol="£", name="British Pound"),
    Currency(code="CNY", symbol="¥", name="Chinese Yuan"),
    Currency(code="SGD", symbol="S$", name="Singapore Dollar"),
    Currency(code="AUD", symbol="A$", name="Australian Dollar"),
    Currency(code="CAD", symbol="C$", name="Canadian Dollar"),
)

UNITS: tuple[Unit, ...] = (
    Unit(code="oz", name="Troy Ounce", multiplier=1.0),
    Unit(code="g", name="Gram", multiplier=1 / GRAMS_PER_TROY_OUNCE),
    Unit(code="kg", name="Kilogram", multiplier=1000 / GRAMS_PER_TROY_OUNCE),
    Unit(code="mace", name="HK Mace (Cheung)", multiplier=0.120337),  # ~3.7429 g
    Unit(code="tael", name="HK Tael (Leung)", multiplier=1.20337),  # 10 mace
)

RANGES: tuple[RangeSelector, ...] = (
    RangeSelector(label="1H", days=1, slice_mode=SliceMode.LAST_HOUR),
    RangeSelector(label="8H", days=1, slice_mode=SliceMode.LAST_8_HOURS),
    RangeSelector(label="24H", days=1, slice_mode=SliceMode.LAST_24_HOURS),
    RangeSelector(label="7D", days=7, slice_mode=SliceMode.NONE),
    RangeSelector(label="1M", days=30, slice_mode=SliceMode.NONE),
)

DEFAULT_RANGE_LABEL = "24H"

# Ranges whose chart axis shows clock time rather than calendar dates.
INTRADAY_RANGE_LABELS = frozenset({"1H", "8H", "24H"})


def find_source(source_id: str | None) -> Source:
    key = (source_id or "").lower()
    return next((s for s in SOURCES if s.id == key), SOURCES[0])


def find_currency(code: str | None) -> Currency:
    key = (code or "").upper()
    return next((c for c in CURRENCIES if c.code == key), CURRENCIES[0])


def find_unit(code: str | None) -> Unit:
    key = (code or "").lower()
    return next((u for u in UNITS if u.code == key), UNITS[0])


def find_range(label: str | None) -> RangeSelector:
    key = (label or "").upper()
    return next((r for r in RANGES if r.label == key), RANGES[0])


def wire_currency_codes() -> list[str]:
    """Lowercase codes of every supported currency, in table order."""
    return [c.code.lower() for c in CURRENCIES]
