"""
geotags: Generate metadata tags from geolocation records.

This package converts a geolocation record (coordinates, geohash, country,
region, city, continent and planet fields) into a flat, ordered list of
small string tuples suitable for embedding in an event record.
"""

__version__ = "0.1.0"

from .options import Options, resolve_options, normalize_options
from .resolution import calculate_resolution, truncate_to_resolution, format_degrees
from .reference import (
    CountryRecord,
    SubdivisionRecord,
    CountryChange,
    ReferenceData,
    TableReference,
    load_default_reference,
)
from .duckdb_reference import (
    DuckDBReference,
    create_reference_from_tables,
    create_reference_from_csv,
)
from .tags import (
    Tag,
    iso31661_namespace,
    iso31662_namespace,
    iso31663_namespace,
    un_m49_namespace,
    country_tag_key,
)
from .pipeline import (
    dedupe,
    sort_tags_by_key,
    filter_out_type,
    filter_non_string_tags,
)
from .generator import GeotagsError, InvalidInputError, TagGenerator, generate_tags

__all__ = [
    "Options",
    "resolve_options",
    "normalize_options",
    "calculate_resolution",
    "truncate_to_resolution",
    "format_degrees",
    "CountryRecord",
    "SubdivisionRecord",
    "CountryChange",
    "ReferenceData",
    "TableReference",
    "load_default_reference",
    "DuckDBReference",
    "create_reference_from_tables",
    "create_reference_from_csv",
    "Tag",
    "iso31661_namespace",
    "iso31662_namespace",
    "iso31663_namespace",
    "un_m49_namespace",
    "country_tag_key",
    "dedupe",
    "sort_tags_by_key",
    "filter_out_type",
    "filter_non_string_tags",
    "GeotagsError",
    "InvalidInputError",
    "TagGenerator",
    "generate_tags",
]
