"""Validation declarations for model properties."""

from .declarations import (
    EmailAddress,
    MaxLength,
    MinLength,
    Range,
    RegularExpression,
    Required,
    StringLength,
    Url,
    Validation,
)

__all__ = [
    "Validation",
    "Required",
    "MaxLength",
    "MinLength",
    "StringLength",
    "Range",
    "RegularExpression",
    "EmailAddress",
    "Url",
]
