"""Tests for tag shapes and namespaces."""

from geotags.options import Options
from geotags.tags import (
    country_tag_key,
    declaration,
    geohash_tag,
    is_declaration,
    is_geohash,
    iso31661_namespace,
    iso31662_namespace,
    iso31663_namespace,
    label,
    namespace_of,
    un_m49_namespace,
)


class TestShapes:
    """Tests for tag constructors."""

    def test_declaration(self):
        """Test declaration shape."""
        tag = declaration("countryCode")
        assert tag == ("G", "countryCode")
        assert is_declaration(tag)
        assert not is_geohash(tag)

    def test_label(self):
        """Test label shapes with and without qualifier."""
        assert label("Hungary", "countryName") == ("g", "Hungary", "countryName")
        assert label("HU", "countryCode", "alpha-2") == ("g", "HU", "countryCode", "alpha-2")

    def test_geohash(self):
        """Test geohash shape."""
        tag = geohash_tag("u2m")
        assert tag == ("g", "u2m")
        assert is_geohash(tag)
        assert not is_declaration(tag)

    def test_namespace_of(self):
        """Test namespace extraction for each shape."""
        assert namespace_of(declaration("lat")) == "lat"
        assert namespace_of(label("47", "lat")) == "lat"
        assert namespace_of(label("HU", "countryCode", "alpha-2")) == "countryCode"
        assert namespace_of(geohash_tag("u")) is None


class TestCountryTagKey:
    """Tests for country_tag_key."""

    def test_name(self):
        """Test the name field maps to countryName."""
        assert country_tag_key("name") == "countryName"

    def test_codes(self):
        """Test code fields map to countryCode."""
        assert country_tag_key("alpha2") == "countryCode"
        assert country_tag_key("numeric") == "countryCode"


class TestNamespaceInflection:
    """Tests for ISO and UN M49 namespace selection."""

    def test_iso31661(self):
        assert iso31661_namespace(Options(iso_as_namespace=True)) == "ISO-3166-1"
        assert iso31661_namespace(Options(iso_as_namespace=False)) == "countryCode"

    def test_iso31662(self):
        assert iso31662_namespace(Options(iso_as_namespace=True)) == "ISO-3166-2"
        assert iso31662_namespace(Options(iso_as_namespace=False)) == "regionCode"

    def test_iso31663(self):
        assert iso31663_namespace(Options(iso_as_namespace=True)) == "ISO-3166-3"
        assert iso31663_namespace(Options(iso_as_namespace=False)) == "countryCode"

    def test_un_m49(self):
        assert un_m49_namespace(Options(un_m49_as_namespace=True)) == "UN M49"
        assert un_m49_namespace(Options(un_m49_as_namespace=False)) == "continentCode"
