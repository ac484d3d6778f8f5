"""Year-keyed public holiday tables.

The engine only needs `HolidayProvider`; `StaticHolidayProvider` serves the bundled
NZ table (or any YAML/mapping with the same shape) and can be swapped for a live source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Protocol, Union, runtime_checkable

import yaml

from .errors import MissingHolidayData

logger = logging.getLogger(__name__)

DEFAULT_HOLIDAYS_PATH = Path(__file__).resolve().parent / "data" / "nz_holidays.yaml"


@dataclass(frozen=True)
class YearHolidays:
    year: int
    national: FrozenSet[date] = field(default_factory=frozenset)
    # Region name -> anniversary day.
    regional: Mapping[str, date] = field(default_factory=dict)

    def regional_date(self, region: Optional[str]) -> Optional[date]:
        if not region:
            return None
        wanted = region.strip().lower()
        for name, d in self.regional.items():
            if name.lower() == wanted:
                return d
        return None

    def is_holiday(self, d: date, region: Optional[str] = None) -> bool:
        if d in self.national:
            return True
        return self.regional_date(region) == d


@runtime_checkable
class HolidayProvider(Protocol):
    def holidays_for(self, year: int) -> YearHolidays:
        ...

    def has_year(self, year: int) -> bool:
        ...


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def _shift_year(d: date, year: int) -> date:
    if d.month == 2 and d.day == 29:
        return date(year, 2, 28)
    return d.replace(year=year)


class StaticHolidayProvider:
    def __init__(self, table: Mapping[int, YearHolidays]):
        self._table: Dict[int, YearHolidays] = dict(table)
        # Requested year -> substituted holidays, so each missing year is reported once.
        self._fallbacks: Dict[int, YearHolidays] = {}

    @classmethod
    def from_mapping(cls, raw: Mapping[Any, Any]) -> "StaticHolidayProvider":
        """Build from `{year: {national: [date], regional: {region: date}}}` (dates or ISO strings)."""
        table: Dict[int, YearHolidays] = {}
        for year_key, entry in (raw or {}).items():
            year = int(year_key)
            entry = entry or {}
            table[year] = YearHolidays(
                year=year,
                national=frozenset(_as_date(v) for v in entry.get("national") or []),
                regional={str(k): _as_date(v) for k, v in (entry.get("regional") or {}).items()},
            )
        return cls(table)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "StaticHolidayProvider":
        with Path(path).open() as handle:
            return cls.from_mapping(yaml.safe_load(handle) or {})

    @classmethod
    def default(cls) -> "StaticHolidayProvider":
        return _default_provider()

    def years(self) -> list[int]:
        return sorted(self._table)

    def has_year(self, year: int) -> bool:
        return year in self._table

    def lookup(self, year: int) -> YearHolidays:
        """Strict lookup: raises `MissingHolidayData` naming the nearest available year."""
        if year in self._table:
            return self._table[year]
        fallback = None
        if self._table:
            # Ties go to the earlier year.
            fallback = min(self._table, key=lambda y: (abs(y - year), y))
        raise MissingHolidayData(year, fallback)

    def holidays_for(self, year: int) -> YearHolidays:
        """Lookup with fallback: a missing year reuses the nearest year's dates moved into `year`."""
        try:
            return self.lookup(year)
        except MissingHolidayData as exc:
            if year in self._fallbacks:
                return self._fallbacks[year]
            if exc.fallback_year is None:
                logger.warning("%s; treating every weekday as a non-holiday.", exc)
                substitute = YearHolidays(year=year)
            else:
                logger.warning("%s; reusing its holiday dates. Add %s to the holiday table.", exc, year)
                source = self._table[exc.fallback_year]
                substitute = YearHolidays(
                    year=year,
                    national=frozenset(_shift_year(d, year) for d in source.national),
                    regional={name: _shift_year(d, year) for name, d in source.regional.items()},
                )
            self._fallbacks[year] = substitute
            return substitute


@lru_cache(maxsize=1)
def _default_provider() -> StaticHolidayProvider:
    return StaticHolidayProvider.from_yaml(DEFAULT_HOLIDAYS_PATH)
