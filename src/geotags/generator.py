"""
Tag generator for geolocation records.

This module turns a geolocation record (coordinates, geohash, country,
region, city, continent and planet fields) into the raw tag sequence, and
provides generate_tags() which validates input, resolves options and runs
post-processing.
"""

import logging
import math
import re
from collections.abc import Mapping
from numbers import Real
from typing import Any, List, Optional, Tuple, Union

import pygeohash

from .options import Options, resolve_options
from .pipeline import postprocess
from .reference import CountryRecord, ReferenceData, load_default_reference
from .resolution import format_degrees, resolution_ladder
from .tags import (
    CITY_NAME,
    CONTINENT_NAME,
    DD,
    DEFAULT_PLANET,
    LAT,
    LON,
    PLANET_NAME,
    QUALIFIERS,
    Tag,
    country_tag_key,
    declaration,
    geohash_tag,
    iso31661_namespace,
    iso31662_namespace,
    iso31663_namespace,
    label,
    un_m49_namespace,
)

logger = logging.getLogger(__name__)

# Length of geohashes computed from coordinates
GEOHASH_PRECISION = 9

_GEOHASH_PATTERN = re.compile(r"^[0-9bcdefghjkmnpqrstuvwxyz]+$")

Coordinates = Tuple[float, float]


class GeotagsError(Exception):
    """Base exception for geotags."""


class InvalidInputError(GeotagsError, TypeError):
    """Raised when the record is missing or is not a mapping."""


def validate_record(record: Any) -> Mapping:
    """
    Check that a record is a mapping.

    Raises:
        InvalidInputError: if record is None or not a mapping
    """
    if record is None:
        raise InvalidInputError("Input is required")
    if not isinstance(record, Mapping):
        raise InvalidInputError(
            f"Input must be a mapping, got {type(record).__name__}"
        )
    return record


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _is_coordinate(value: Any) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class TagGenerator:
    """
    Generator for the raw, unprocessed tag sequence of a record.

    Sections are emitted in a fixed order: coordinates, geohash, country,
    successor countries, subdivision, city, continent, planet. A section
    whose data is missing or does not match the reference tables emits
    nothing.
    """

    def __init__(self, reference: ReferenceData, options: Options):
        """
        Initialize the generator.

        Args:
            reference: Reference data for country lookups
            options: Resolved options
        """
        self.reference = reference
        self.options = options

    def generate(self, record: Mapping) -> List[Tag]:
        """
        Generate raw tags for a record.

        Args:
            record: Geolocation record

        Returns:
            Tags in generation order, possibly with duplicates
        """
        opts = self.options
        tags: List[Tag] = []

        coords = self._explicit_coordinates(record)
        geohash = self._input_geohash(record) if coords is None else None
        if geohash is not None:
            coords = self._decode(geohash)

        if opts.gps and coords is not None:
            tags.extend(self._coordinate_tags(*coords))

        if opts.geohash:
            if geohash is None and coords is not None:
                geohash = pygeohash.encode(*coords, precision=GEOHASH_PRECISION)
            if geohash is not None:
                tags.extend(self._geohash_tags(geohash))

        country = self._lookup_country(record) if opts.iso31661 else None
        if country is not None:
            tags.extend(self._country_tags(country))
            if opts.iso31663:
                tags.extend(self._change_tags(country))

        if opts.iso31662:
            tags.extend(self._subdivision_tags(record))

        tags.extend(self._city_tags(record))
        tags.extend(self._continent_tags(record))
        tags.extend(self._planet_tags(record))
        return tags

    def _explicit_coordinates(self, record: Mapping) -> Optional[Coordinates]:
        lat, lon = record.get("lat"), record.get("lon")
        if _is_coordinate(lat) and _is_coordinate(lon):
            return lat, lon
        return None

    def _input_geohash(self, record: Mapping) -> Optional[str]:
        """Geohash from the record, when decoding is enabled and it is well formed."""
        if not self.options.decode_geohash:
            return None
        value = record.get("geohash")
        if not isinstance(value, str):
            return None
        value = value.lower()
        if not _GEOHASH_PATTERN.match(value):
            logger.debug("Ignoring malformed geohash %r", value)
            return None
        return value

    def _decode(self, geohash: str) -> Coordinates:
        lat, lon = pygeohash.decode(geohash)
        return float(lat), float(lon)

    def _coordinate_tags(self, lat: float, lon: float) -> List[Tag]:
        max_resolution = self.options.dd_max_resolution
        tags = [
            declaration(DD),
            label(f"{format_degrees(lat)}, {format_degrees(lon)}", DD),
        ]
        for namespace, value in ((LAT, lat), (LON, lon)):
            tags.append(declaration(namespace))
            tags.extend(
                label(format_degrees(v), namespace)
                for v in resolution_ladder(value, max_resolution)
            )
        return tags

    def _geohash_tags(self, geohash: str) -> List[Tag]:
        return [geohash_tag(geohash[:n]) for n in range(len(geohash), 0, -1)]

    def _lookup_country(self, record: Mapping) -> Optional[CountryRecord]:
        code = record.get("countryCode")
        if not isinstance(code, str) or not code:
            return None
        country = self.reference.find_country(code)
        if country is None:
            logger.debug("No country record for %r", code)
        return country

    def _country_tags(self, country: CountryRecord) -> List[Tag]:
        namespace = iso31661_namespace(self.options)
        tags = [declaration(namespace)]
        for field, qualifier in QUALIFIERS.items():
            tags.append(label(country.value(field), namespace, qualifier))
        name_key = country_tag_key("name")
        tags.append(declaration(name_key))
        tags.append(label(country.name, name_key))
        return tags

    def _change_tags(self, country: CountryRecord) -> List[Tag]:
        """Tags for successor codes of a country; names never produce tags."""
        namespace = iso31663_namespace(self.options)
        tags = []
        for field, qualifier in QUALIFIERS.items():
            original = country.value(field)
            if not original:
                continue
            for value in self.reference.successors(field, original):
                if value != original:
                    tags.append(label(value, namespace, qualifier))
        if tags:
            tags.insert(0, declaration(namespace))
        return tags

    def _subdivision_tags(self, record: Mapping) -> List[Tag]:
        code, name = record.get("countryCode"), record.get("regionName")
        if not isinstance(code, str) or not isinstance(name, str) or not code or not name:
            return []
        subdivision = self.reference.find_subdivision(code, name)
        if subdivision is None:
            logger.debug("No subdivision record for %r in %r", name, code)
            return []
        namespace = iso31662_namespace(self.options)
        return [declaration(namespace), label(subdivision.code, namespace)]

    def _city_tags(self, record: Mapping) -> List[Tag]:
        opts = self.options
        city = record.get("cityName")
        if (opts.city or opts.city_name) and _present(city):
            return [declaration(CITY_NAME), label(city, CITY_NAME)]
        return []

    def _continent_tags(self, record: Mapping) -> List[Tag]:
        opts = self.options
        tags = []
        name = record.get("continentName")
        if (opts.continent or opts.continent_name) and _present(name):
            tags += [declaration(CONTINENT_NAME), label(name, CONTINENT_NAME)]
        code = record.get("continentCode")
        if (opts.continent or opts.continent_code) and _present(code):
            namespace = un_m49_namespace(opts)
            tags += [declaration(namespace), label(code, namespace)]
        return tags

    def _planet_tags(self, record: Mapping) -> List[Tag]:
        opts = self.options
        if not (opts.planet or opts.planet_name):
            return []
        planet = record.get("planetName")
        if not _present(planet):
            planet = DEFAULT_PLANET
        return [declaration(PLANET_NAME), label(planet, PLANET_NAME)]


def generate_tags(
    record: Optional[Mapping] = None,
    options: Union[Options, Mapping[str, Any], None] = None,
    reference: Optional[ReferenceData] = None,
) -> List[Tag]:
    """
    Generate tags for a geolocation record.

    Args:
        record: Geolocation record (lat, lon, geohash, countryCode, ...)
        options: Options instance or mapping of overrides
        reference: Reference data (default: shared pycountry tables)

    Returns:
        List of tags

    Raises:
        InvalidInputError: if record is missing or not a mapping
    """
    record = validate_record(record)
    opts = resolve_options(options)
    if reference is None:
        reference = load_default_reference()

    tags = TagGenerator(reference, opts).generate(record)
    return postprocess(tags, opts)
