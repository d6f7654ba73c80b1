"""Demonstration fields shown when a PDF exposes no fillable form."""

from __future__ import annotations

from typing import Tuple

from .models import FieldKind, FormField

_FALLBACK_FIELDS: Tuple[FormField, ...] = (
    FormField(
        id="1",
        name="fullName",
        kind=FieldKind.TEXT,
        label="Full Name",
        required=True,
        placeholder="Enter your full name",
    ),
    FormField(
        id="2",
        name="email",
        kind=FieldKind.TEXT,
        label="Email Address",
        required=True,
        placeholder="Enter your email",
    ),
    FormField(
        id="3",
        name="phone",
        kind=FieldKind.TEXT,
        label="Phone Number",
        placeholder="Enter your phone number",
    ),
    FormField(
        id="4",
        name="address",
        kind=FieldKind.MULTILINE_TEXT,
        label="Address",
        placeholder="Enter your full address",
    ),
    FormField(
        id="5",
        name="country",
        kind=FieldKind.SINGLE_SELECT,
        label="Country",
        options=("United States", "Canada", "United Kingdom", "Australia", "Germany", "France", "Other"),
    ),
    FormField(
        id="6",
        name="newsletter",
        kind=FieldKind.CHECKBOX,
        label="Subscribe to newsletter",
        value=False,
    ),
    FormField(
        id="7",
        name="contactMethod",
        kind=FieldKind.RADIO_GROUP,
        label="Preferred Contact Method",
        options=("Email", "Phone", "Mail"),
    ),
)


def fallback_fields() -> Tuple[FormField, ...]:
    """Return the seven demonstration fields, every value at its empty default."""

    return tuple(item.reset() for item in _FALLBACK_FIELDS)


__all__ = ["fallback_fields"]
