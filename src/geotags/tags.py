"""
Tag shapes and namespace names.

Tags are plain tuples of strings, in one of three shapes:

- declaration: ("G", namespace)
- label:       ("g", value, namespace) or ("g", value, namespace, qualifier)
- geohash:     ("g", prefix)

Declarations announce a namespace; labels carry a value within it. Geohash
tags carry only the prefix.
"""

from typing import Any, Optional, Sequence, Tuple

Tag = Tuple[str, ...]

# Markers
DECLARATION = "G"
LABEL = "g"
MARKERS = frozenset({DECLARATION, LABEL})

# Namespaces
DD = "dd"
LAT = "lat"
LON = "lon"
GEOHASH = "geohash"
COUNTRY_CODE = "countryCode"
COUNTRY_NAME = "countryName"
REGION_CODE = "regionCode"
CITY_NAME = "cityName"
CONTINENT_NAME = "continentName"
CONTINENT_CODE = "continentCode"
PLANET_NAME = "planetName"

ISO_3166_1 = "ISO-3166-1"
ISO_3166_2 = "ISO-3166-2"
ISO_3166_3 = "ISO-3166-3"
UN_M49 = "UN M49"

DEFAULT_PLANET = "Earth"

# Qualifiers for country code labels, keyed by record field
QUALIFIERS = {
    "alpha2": "alpha-2",
    "alpha3": "alpha-3",
    "numeric": "numeric",
}


def declaration(namespace: str) -> Tag:
    return (DECLARATION, namespace)


def label(value: Any, namespace: str, qualifier: Optional[str] = None) -> Tag:
    if qualifier is None:
        return (LABEL, value, namespace)
    return (LABEL, value, namespace, qualifier)


def geohash_tag(prefix: str) -> Tag:
    return (LABEL, prefix)


def is_declaration(tag: Sequence[Any]) -> bool:
    return len(tag) == 2 and tag[0] == DECLARATION


def is_geohash(tag: Sequence[Any]) -> bool:
    return len(tag) == 2 and tag[0] == LABEL


def namespace_of(tag: Sequence[Any]) -> Optional[str]:
    """
    Namespace a tag belongs to.

    Declarations belong to the namespace they declare; geohash tags have none.
    """
    if is_declaration(tag):
        return tag[1]
    if len(tag) >= 3:
        return tag[2]
    return None


def country_tag_key(field: str) -> str:
    """Plain key for a country record field: names and codes are kept apart."""
    return COUNTRY_NAME if field == "name" else COUNTRY_CODE


def iso31661_namespace(options) -> str:
    return ISO_3166_1 if options.iso_as_namespace else COUNTRY_CODE


def iso31662_namespace(options) -> str:
    return ISO_3166_2 if options.iso_as_namespace else REGION_CODE


def iso31663_namespace(options) -> str:
    return ISO_3166_3 if options.iso_as_namespace else COUNTRY_CODE


def un_m49_namespace(options) -> str:
    return UN_M49 if options.un_m49_as_namespace else CONTINENT_CODE
