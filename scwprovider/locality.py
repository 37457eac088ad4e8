"""Helpers for locality-qualified identifiers such as ``fr-par/<uuid>``."""

import re

from .errors import ValidationError

_REGION_RE = re.compile(r"^[a-z]{2}-[a-z]{3}$")
_ZONE_RE = re.compile(r"^[a-z]{2}-[a-z]{3}-[0-9]+$")


def new_id_string(locality: str, id_: str) -> str:
    """Build the ID stored in state: ``<locality>/<id>``."""
    return f"{locality}/{id_}"


def new_id_strings(locality: str, ids: list[str] | None) -> list[str]:
    return [new_id_string(locality, id_) for id_ in ids or []]


def expand_id(value: str | None) -> str:
    """Strip the locality prefix of an ID if there is one."""
    if not value:
        return ""
    return value.rsplit("/", 1)[-1]


def parse_locality_id(value: str) -> tuple[str, str]:
    """Split ``<locality>/<id>`` into its two parts.

    Raises:
        ValidationError: If value is not locality-qualified
    """
    parts = value.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValidationError(f"cant parse localized id: {value}")
    return parts[0], parts[1]


def parse_regional_id(value: str) -> tuple[str, str]:
    region, id_ = parse_locality_id(value)
    if not _REGION_RE.match(region):
        raise ValidationError(f"invalid region {region!r} in id {value!r}")
    return region, id_


def parse_zonal_id(value: str) -> tuple[str, str]:
    zone, id_ = parse_locality_id(value)
    if not _ZONE_RE.match(zone):
        raise ValidationError(f"invalid zone {zone!r} in id {value!r}")
    return zone, id_


def region_of_zone(zone: str) -> str:
    """``fr-par-3`` -> ``fr-par``."""
    return zone.rsplit("-", 1)[0]


def flatten_id(declared: str | None, locality: str, remote_id: str | None) -> str | None:
    """ID to store for a reference field.

    Keeps the declared spelling (bare or qualified) when it designates the
    remote ID, so reading back does not show a spurious change.
    """
    if not remote_id:
        return None
    if declared and expand_id(declared) == remote_id:
        return declared
    return new_id_string(locality, remote_id)
