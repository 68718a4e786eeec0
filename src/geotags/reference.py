"""
Reference data for country, subdivision and country change lookups.

This module defines the reference data interface, an in-memory table
implementation, and a loader that builds the tables from pycountry
(ISO 3166-1, ISO 3166-2 and ISO 3166-3).
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple

import pycountry

logger = logging.getLogger(__name__)

# Country record fields, in tag order
COUNTRY_FIELDS = ("alpha2", "alpha3", "numeric", "name")

# Successors for ISO 3166-3 entries without a single successor (alpha-4
# suffix HH or XX)
SPLIT_SUCCESSORS: Dict[str, Tuple[str, ...]] = {
    "ANHH": ("BQ", "CW", "SX"),
    "CSHH": ("CZ", "SK"),
    "CSXX": ("RS", "ME"),
    "FQHH": ("AQ", "TF"),
    "GEHH": ("KI", "TV"),
    "NTHH": ("IQ", "SA"),
    "PCHH": ("FM", "MH", "MP", "PW"),
    "SUHH": (
        "AM", "AZ", "BY", "EE", "GE", "KG", "KZ", "LT",
        "LV", "MD", "RU", "TJ", "TM", "UA", "UZ",
    ),
}


def check_field(field: str) -> str:
    if field not in COUNTRY_FIELDS:
        raise ValueError(f"Unknown country field: {field!r}")
    return field


@dataclass(frozen=True)
class CountryRecord:
    """An ISO 3166-1 country (or a former one, for ISO 3166-3)."""

    alpha2: str
    alpha3: Optional[str] = None
    numeric: Optional[str] = None
    name: Optional[str] = None

    def value(self, field: str) -> Optional[str]:
        return getattr(self, check_field(field))


@dataclass(frozen=True)
class SubdivisionRecord:
    """An ISO 3166-2 subdivision; parent is the country alpha-2 code."""

    code: str
    name: str
    parent: str


@dataclass(frozen=True)
class CountryChange:
    """An ISO 3166-3 change: a former country and its successors."""

    former: CountryRecord
    successors: Tuple[CountryRecord, ...]


class ReferenceData(ABC):
    """
    Abstract base class for reference data lookups.

    All lookups are exact matches. A miss returns None (or the value
    itself, for successors) and is never an error.
    """

    @abstractmethod
    def find_country(self, alpha2: str) -> Optional[CountryRecord]:
        """
        Look up a country by alpha-2 code.

        Args:
            alpha2: ISO 3166-1 alpha-2 code

        Returns:
            Matching record, or None
        """
        pass

    @abstractmethod
    def find_subdivision(self, parent: str, name: str) -> Optional[SubdivisionRecord]:
        """
        Look up a subdivision by country code and subdivision name.

        Args:
            parent: ISO 3166-1 alpha-2 code of the country
            name: Subdivision name

        Returns:
            Matching record, or None
        """
        pass

    @abstractmethod
    def successors(self, field: str, value: str) -> List[str]:
        """
        Resolve a country field value through the change table.

        Args:
            field: One of alpha2, alpha3, numeric, name
            value: Current value of that field

        Returns:
            The successors' values when value belongs to a former country,
            otherwise [value] (it is already current, or never changed)
        """
        pass


class TableReference(ReferenceData):
    """
    Reference data held in plain Python tables.

    Tables are indexed once at construction and never mutated afterwards,
    so one instance can be shared freely.
    """

    def __init__(
        self,
        countries: Iterable[CountryRecord] = (),
        subdivisions: Iterable[SubdivisionRecord] = (),
        changes: Iterable[CountryChange] = (),
    ):
        self.countries: Tuple[CountryRecord, ...] = tuple(countries)
        self.subdivisions: Tuple[SubdivisionRecord, ...] = tuple(subdivisions)
        self.changes: Tuple[CountryChange, ...] = tuple(changes)

        # First record wins on duplicate keys
        self._countries: Dict[str, CountryRecord] = {}
        for country in self.countries:
            self._countries.setdefault(country.alpha2, country)

        self._subdivisions: Dict[Tuple[str, str], SubdivisionRecord] = {}
        for subdivision in self.subdivisions:
            key = (subdivision.parent, subdivision.name)
            self._subdivisions.setdefault(key, subdivision)

        self._forward: Dict[Tuple[str, str], List[str]] = {}
        for change in self.changes:
            for field in COUNTRY_FIELDS:
                former = change.former.value(field)
                if not former:
                    continue
                values = self._forward.setdefault((field, former), [])
                values.extend(
                    s.value(field) for s in change.successors if s.value(field)
                )

    def find_country(self, alpha2: str) -> Optional[CountryRecord]:
        return self._countries.get(alpha2)

    def find_subdivision(self, parent: str, name: str) -> Optional[SubdivisionRecord]:
        return self._subdivisions.get((parent, name))

    def successors(self, field: str, value: str) -> List[str]:
        check_field(field)
        forward = self._forward.get((field, value))
        if forward:
            return list(forward)
        return [value]


def _country_record(country) -> CountryRecord:
    return CountryRecord(
        alpha2=country.alpha_2,
        alpha3=getattr(country, "alpha_3", None),
        numeric=getattr(country, "numeric", None),
        name=country.name,
    )


def _historic_record(historic) -> CountryRecord:
    return CountryRecord(
        alpha2=getattr(historic, "alpha_2", None) or historic.alpha_4[:2],
        alpha3=getattr(historic, "alpha_3", None),
        numeric=getattr(historic, "numeric", None),
        name=historic.name,
    )


def _successor_codes(alpha4: str) -> Tuple[str, ...]:
    """
    Successor alpha-2 codes for an ISO 3166-3 alpha-4 code.

    The last two letters name the successor; AA means the former alpha-2
    was kept, HH and XX mean there is no single successor.
    """
    if alpha4 in SPLIT_SUCCESSORS:
        return SPLIT_SUCCESSORS[alpha4]
    suffix = alpha4[2:]
    if suffix == "AA":
        return (alpha4[:2],)
    if suffix in ("HH", "XX"):
        return ()
    return (suffix,)


def build_pycountry_reference() -> TableReference:
    """
    Build reference tables from the pycountry databases.

    Returns:
        TableReference with ISO 3166-1 countries, ISO 3166-2 subdivisions
        and ISO 3166-3 changes
    """
    countries = [_country_record(c) for c in pycountry.countries]
    by_alpha2 = {c.alpha2: c for c in countries}

    subdivisions = [
        SubdivisionRecord(code=s.code, name=s.name, parent=s.country_code)
        for s in pycountry.subdivisions
    ]

    historic = sorted(
        pycountry.historic_countries,
        key=lambda h: getattr(h, "withdrawal_date", ""),
    )
    # Latest withdrawal wins when a former alpha-2 was used more than once
    former_by_alpha2 = {}
    for h in historic:
        record = _historic_record(h)
        former_by_alpha2[record.alpha2] = record

    changes = []
    for h in historic:
        successors = []
        for code in _successor_codes(h.alpha_4):
            record = by_alpha2.get(code) or former_by_alpha2.get(code)
            if record is None:
                logger.debug("No record for successor %s of %s", code, h.alpha_4)
                continue
            successors.append(record)
        changes.append(CountryChange(_historic_record(h), tuple(successors)))

    logger.debug(
        "Loaded %d countries, %d subdivisions, %d changes",
        len(countries), len(subdivisions), len(changes),
    )
    return TableReference(countries, subdivisions, changes)


@lru_cache(maxsize=None)
def load_default_reference() -> TableReference:
    """Shared pycountry reference, built on first use."""
    return build_pycountry_reference()
