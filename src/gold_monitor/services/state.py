"""Viewer selections as an explicit state container.

``reduce`` applies an action to the configuration; ``effects_between`` derives,
from the old and new configuration, which re-fetches and timer restarts must run.
"""
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

from gold_monitor.catalog import (
    CURRENCIES,
    DEFAULT_RANGE_LABEL,
    SOURCES,
    UNITS,
    find_currency,
    find_range,
    find_source,
    find_unit,
)


class MonitorConfig(BaseModel):
    """Session-only selections; values are always valid catalog keys."""

    model_config = ConfigDict(frozen=True)

    source_id: str = SOURCES[0].id
    currency: str = CURRENCIES[0].code
    unit: str = UNITS[0].code
    range_label: str = DEFAULT_RANGE_LABEL
    live: bool = True
    dark_mode: bool = True
    pan_mode: bool = False


@dataclass(frozen=True)
class SelectSource:
    source_id: str


@dataclass(frozen=True)
class SelectCurrency:
    code: str


@dataclass(frozen=True)
class SelectUnit:
    code: str


@dataclass(frozen=True)
class SelectRange:
    label: str


@dataclass(frozen=True)
class SetLive:
    live: bool


@dataclass(frozen=True)
class ToggleLive:
    pass


@dataclass(frozen=True)
class SetDarkMode:
    dark_mode: bool


@dataclass(frozen=True)
class SetPanMode:
    pan_mode: bool


Action = (
    SelectSource
    | SelectCurrency
    | SelectUnit
    | SelectRange
    | SetLive
    | ToggleLive
    | SetDarkMode
    | SetPanMode
)


class Effect(str, Enum):
    RESTART_POLLING = "restart_polling"
    STOP_POLLING = "stop_polling"
    REFETCH_CHART = "refetch_chart"
    REANCHOR_TICKER = "reanchor_ticker"


def reduce(config: MonitorConfig, action: Action) -> MonitorConfig:
    """Return the configuration after ``action``; unknown keys fall back to defaults."""
    if isinstance(action, SelectSource):
        update = {"source_id": find_source(action.source_id).id}
    elif isinstance(action, SelectCurrency):
        update = {"currency": find_currency(action.code).code}
    elif isinstance(action, SelectUnit):
        update = {"unit": find_unit(action.code).code}
    elif isinstance(action, SelectRange):
        update = {"range_label": find_range(action.label).label}
    elif isinstance(action, SetLive):
        update = {"live": action.live}
    elif isinstance(action, ToggleLive):
        update = {"live": not config.live}
    elif isinstance(action, SetDarkMode):
        update = {"dark_mode": action.dark_mode}
    elif isinstance(action, SetPanMode):
        update = {"pan_mode": action.pan_mode}
    else:
        raise TypeError(f"Unknown action: {action!r}")
    return config.model_copy(update=update)


def effects_between(old: MonitorConfig, new: MonitorConfig) -> set[Effect]:
    effects: set[Effect] = set()
    if new.live and (not old.live or new.source_id != old.source_id):
        effects.add(Effect.RESTART_POLLING)
    if old.live and not new.live:
        effects.add(Effect.STOP_POLLING)
    if (old.source_id, old.currency, old.range_label) != (
        new.source_id,
        new.currency,
        new.range_label,
    ):
        effects.add(Effect.REFETCH_CHART)
    if (old.currency, old.unit, old.live) != (new.currency, new.unit, new.live):
        effects.add(Effect.REANCHOR_TICKER)
    return effects
