"""
Field value checks.

Two kinds of checks live here:
- Required-field presence: a hard constraint enforced by the Record Store.
- Type-shaped values (IP address, number): advisory only. Technicians
  often store partial data in the field, so these only produce warnings
  for display and never block a write.
"""

from __future__ import annotations

import ipaddress
from typing import Iterable, Mapping

from netcustomers.domain.errors import ValidationError
from netcustomers.domain.models import FieldDefinition, FieldType


def is_blank(value: object) -> bool:
    """True for None, empty and whitespace-only values."""
    return value is None or not str(value).strip()


def check_required(
    values: Mapping[str, str],
    fields: Iterable[FieldDefinition],
    record_id: str | None = None,
) -> None:
    """
    Ensure every required field has a non-blank value.

    Fields are checked in presentation order so the first missing one
    is reported.

    Raises:
        ValidationError: naming the first missing required field
    """
    for definition in sorted(fields, key=lambda f: f.order):
        if definition.required and is_blank(values.get(definition.key)):
            raise ValidationError(
                f"Required field '{definition.key}' is missing",
                field=definition.key,
                record_id=record_id,
            )


def advisory_warning(definition: FieldDefinition, value: str) -> str | None:
    """Warning text for a malformed typed value, or None."""
    if is_blank(value):
        return None
    text = str(value).strip()

    if definition.type == FieldType.IP:
        try:
            ipaddress.ip_address(text)
        except ValueError:
            return f"'{text}' is not a valid IP address"
    elif definition.type == FieldType.NUMBER:
        try:
            float(text)
        except ValueError:
            return f"'{text}' is not a number"
    return None


def advisory_warnings(
    values: Mapping[str, str],
    fields: Iterable[FieldDefinition],
) -> dict[str, str]:
    """Map of field key -> warning for all malformed typed values."""
    warnings: dict[str, str] = {}
    for definition in fields:
        warning = advisory_warning(definition, values.get(definition.key, ""))
        if warning:
            warnings[definition.key] = warning
    return warnings
