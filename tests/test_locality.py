"""Tests for locality-qualified IDs."""

import pytest

from scwprovider.errors import ValidationError
from scwprovider.locality import (
    expand_id,
    flatten_id,
    new_id_string,
    new_id_strings,
    parse_regional_id,
    parse_zonal_id,
    region_of_zone,
)

UUID = "0b7a9b5c-3a5e-4e8e-8d7e-1a2b3c4d5e6f"


def test_new_id_string():
    assert new_id_string("fr-par", UUID) == f"fr-par/{UUID}"
    assert new_id_strings("fr-par", ["a", "b"]) == ["fr-par/a", "fr-par/b"]
    assert new_id_strings("fr-par", None) == []


def test_expand_id():
    """Test the locality prefix is stripped, bare IDs are kept."""
    assert expand_id(f"fr-par/{UUID}") == UUID
    assert expand_id(UUID) == UUID
    assert expand_id(None) == ""
    assert expand_id("") == ""


def test_parse_regional_id():
    assert parse_regional_id(f"nl-ams/{UUID}") == ("nl-ams", UUID)


def test_parse_zonal_id():
    assert parse_zonal_id(f"fr-par-3/{UUID}") == ("fr-par-3", UUID)


@pytest.mark.parametrize("value", [UUID, "fr-par/", f"a/b/{UUID}", f"fr-par-1/{UUID}"])
def test_parse_regional_id_invalid(value):
    with pytest.raises(ValidationError):
        parse_regional_id(value)


def test_parse_zonal_id_rejects_region():
    with pytest.raises(ValidationError):
        parse_zonal_id(f"fr-par/{UUID}")


def test_region_of_zone():
    assert region_of_zone("fr-par-3") == "fr-par"
    assert region_of_zone("pl-waw-1") == "pl-waw"


def test_flatten_id_keeps_declared_spelling():
    """Test a bare declared ID is kept when it designates the remote ID."""
    assert flatten_id(UUID, "fr-par", UUID) == UUID
    assert flatten_id(f"fr-par/{UUID}", "fr-par", UUID) == f"fr-par/{UUID}"


def test_flatten_id_qualifies_other_ids():
    assert flatten_id(None, "fr-par", UUID) == f"fr-par/{UUID}"
    assert flatten_id("fr-par/other", "fr-par", UUID) == f"fr-par/{UUID}"
    assert flatten_id(UUID, "fr-par", None) is None
