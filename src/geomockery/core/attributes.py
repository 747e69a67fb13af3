"""Synthetic attribute values from a typed attribute schema."""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from ..models import (
    IdentifierAttribute,
    NominalAttribute,
    OrdinalAttribute,
    QuantitativeAttribute,
    TemporalAttribute,
)
from .randomness import RandomValueProvider

logger = logging.getLogger(__name__)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC string with millisecond precision and a trailing Z."""
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def synthesize(definitions: Iterable[Any], rng: RandomValueProvider) -> dict[str, Any]:
    """Produce one synthetic value per attribute definition.

    Quantitative attributes with a unit also emit a ``<name>_unit`` field.
    Definitions of an unrecognised kind produce no property.
    """
    properties: dict[str, Any] = {}

    for attr in definitions:
        if isinstance(attr, (NominalAttribute, OrdinalAttribute)):
            properties[attr.name] = rng.pick(attr.values)

        elif isinstance(attr, QuantitativeAttribute):
            properties[attr.name] = rng.uniform_float(attr.range.min, attr.range.max)
            if attr.range.unit:
                properties[f"{attr.name}_unit"] = attr.range.unit

        elif isinstance(attr, TemporalAttribute):
            moment = rng.timestamp(attr.range.start, attr.range.end)
            properties[attr.name] = format_timestamp(moment)

        elif isinstance(attr, IdentifierAttribute):
            if attr.values:
                properties[attr.name] = rng.pick(attr.values)
            else:
                properties[attr.name] = rng.identifier(attr.format.digits, attr.format.prefix)

        else:
            logger.debug("Skipping attribute of unknown kind: %r", attr)

    return properties
