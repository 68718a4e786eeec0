"""
Options controlling which tags are generated and how they are post-processed.

Options are immutable. Callers pass overrides as a mapping (snake_case field
names or the camelCase names used by JavaScript hosts) and resolve_options
overlays them onto a fresh set of defaults.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Union

from .resolution import DEFAULT_MAX_RESOLUTION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Options:
    """Flags for tag generation and post-processing."""

    dedupe: bool = True
    """Drop tags repeating an earlier value within the same namespace."""

    sort: bool = False
    """Stable-sort the output (declarations first)."""

    sanitize: bool = True
    """Drop tags with unknown markers or non-string fields."""

    iso_as_namespace: bool = False
    """Use ISO-3166-x as namespace instead of countryCode/regionCode."""

    un_m49_as_namespace: bool = True
    """Use 'UN M49' as namespace for continent codes instead of continentCode."""

    geohash: bool = True
    """Emit the geohash prefix ladder."""

    decode_geohash: bool = True
    """Derive coordinates from an input geohash when lat/lon are missing."""

    gps: bool = False
    """Emit decimal degree and per-resolution lat/lon tags."""

    dd_max_resolution: int = DEFAULT_MAX_RESOLUTION
    """Maximum number of fractional digits in lat/lon tags."""

    iso31661: bool = True
    """Emit country code and name tags."""

    iso31662: bool = False
    """Emit subdivision code tags."""

    iso31663: bool = False
    """Emit tags for successor country codes (forces iso31661)."""

    city: bool = True
    city_name: Optional[bool] = None

    country: bool = True
    country_name: Optional[bool] = None
    country_code: Optional[bool] = None

    region: bool = True
    region_name: Optional[bool] = None
    region_code: Optional[bool] = None

    continent: bool = True
    continent_name: Optional[bool] = None
    continent_code: Optional[bool] = None

    planet: bool = False
    planet_name: Optional[bool] = None

    legacy: bool = False
    """Emit the flat tag family (no namespace declarations)."""

    def __post_init__(self):
        resolution = self.dd_max_resolution
        if isinstance(resolution, bool) or not isinstance(resolution, int):
            raise ValueError("dd_max_resolution must be an integer")
        if resolution < 1:
            raise ValueError("dd_max_resolution must be at least 1")


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


_FIELDS = {f.name: f for f in fields(Options)}
_ALIASES = {_camel_case(name): name for name in _FIELDS}


def _canonical_overrides(overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Map caller keys onto Options field names, skipping unset values."""
    result: Dict[str, Any] = {}
    for key, value in overrides.items():
        name = key if key in _FIELDS else _ALIASES.get(key)
        if name is None:
            logger.debug("Ignoring unknown option %r", key)
            continue
        # None means "not supplied" unless the flag itself defaults to None
        if value is None and _FIELDS[name].default is not None:
            continue
        result[name] = value
    return result


def normalize_options(options: Options) -> Options:
    """
    Apply couplings between flags.

    Successor-country tags are derived from the base country record, so
    iso31663 forces iso31661 on.
    """
    if options.iso31663 and not options.iso31661:
        options = replace(options, iso31661=True)
    return options


def resolve_options(options: Union[Options, Mapping[str, Any], None] = None) -> Options:
    """
    Resolve caller options over the defaults.

    Args:
        options: None, an Options instance or a mapping of overrides

    Returns:
        Normalized Options
    """
    if options is None:
        return Options()
    if isinstance(options, Options):
        return normalize_options(options)
    if not isinstance(options, Mapping):
        raise ValueError(f"Options must be a mapping, got {type(options).__name__}")

    overrides = _canonical_overrides(options)
    if overrides:
        logger.debug("Option overrides: %s", overrides)
    return normalize_options(replace(Options(), **overrides))
