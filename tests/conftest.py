"""Shared fixtures."""

import pytest
from geotags.reference import (
    CountryChange,
    CountryRecord,
    SubdivisionRecord,
    TableReference,
)

HUNGARY = CountryRecord("HU", "HUN", "348", "Hungary")
GERMANY = CountryRecord("DE", "DEU", "276", "Germany")
ANGUILLA = CountryRecord("AI", "AIA", "660", "Anguilla")
DJIBOUTI = CountryRecord("DJ", "DJI", "262", "Djibouti")
CZECHIA = CountryRecord("CZ", "CZE", "203", "Czechia")
SLOVAKIA = CountryRecord("SK", "SVK", "703", "Slovakia")


@pytest.fixture
def sample_reference():
    """Small hand-built reference with a few countries and changes."""
    return TableReference(
        countries=[HUNGARY, GERMANY, ANGUILLA, DJIBOUTI, CZECHIA, SLOVAKIA],
        subdivisions=[
            SubdivisionRecord("HU-BU", "Budapest", "HU"),
            SubdivisionRecord("HU-PE", "Pest", "HU"),
            SubdivisionRecord("DE-BE", "Berlin", "DE"),
        ],
        changes=[
            CountryChange(
                CountryRecord("AI", "AFI", "262", "French Afars and Issas"),
                (DJIBOUTI,),
            ),
            CountryChange(
                CountryRecord("DD", "DDR", "278", "German Democratic Republic"),
                (GERMANY,),
            ),
            CountryChange(
                CountryRecord("CS", "CSK", "200", "Czechoslovakia"),
                (CZECHIA, SLOVAKIA),
            ),
        ],
    )
