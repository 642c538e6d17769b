#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

"""
Per-kind constraint extraction (length, numeric range, image limits, date-time behavior, lookup target).

Each extractor writes a record field only when the raw descriptor carries the source value,
so refreshing with a partial descriptor keeps whatever the record already held.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Optional

from ....common.enums import AttributeKind, AttributeTypeCode, DateTimeBehavior
from ..schema import AttributeMetadata, FieldRecord, ImageData, LookupData
from ..utils.merges import first_present, merge_if_present

logger = logging.getLogger(__name__)


class BehaviorParseError(ValueError):
    """Raised (or carried) when a date-time behavior string names no known behavior."""


@dataclass
class BehaviorParseResult:
    value: Optional[DateTimeBehavior] = None
    error: Optional[BehaviorParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_date_time_behavior(raw: str) -> BehaviorParseResult:
    """
    Parse a behavior by member name ('DateOnly') or by its numeric value ('2').
    Never raises; failures come back in the result.
    """
    text = (raw or "").strip()
    if text in DateTimeBehavior.__members__:
        return BehaviorParseResult(value=DateTimeBehavior[text])
    try:
        return BehaviorParseResult(value=DateTimeBehavior(int(text)))
    except ValueError:
        return BehaviorParseResult(error=BehaviorParseError(f"Unknown date-time behavior: {raw!r}"))


def to_decimal(value: float) -> Decimal:
    """Widen a float bound into the decimal domain used by field records."""
    return Decimal(str(value))


def extract_max_length(attribute: AttributeMetadata, result: FieldRecord) -> None:
    merge_if_present(result, "max_length", getattr(attribute, "max_length", None))


def extract_range(attribute: AttributeMetadata, result: FieldRecord) -> None:
    merge_if_present(result, "min", getattr(attribute, "min_value", None), Decimal)
    merge_if_present(result, "max", getattr(attribute, "max_value", None), Decimal)


def extract_widened_range(attribute: AttributeMetadata, result: FieldRecord) -> None:
    merge_if_present(result, "min", getattr(attribute, "min_value", None), to_decimal)
    merge_if_present(result, "max", getattr(attribute, "max_value", None), to_decimal)


_IMAGE_LIMITS = ("can_store_full_image", "max_width", "max_height", "max_size_in_kb")


def extract_image_limits(attribute: AttributeMetadata, result: FieldRecord) -> None:
    incoming = {name: getattr(attribute, name, None) for name in _IMAGE_LIMITS}
    if all(value is None for value in incoming.values()):
        return

    # Each limit falls back on its own
    previous = result.image_data or ImageData()
    result.image_data = ImageData(
        **{name: first_present(value, getattr(previous, name)) for name, value in incoming.items()}
    )


def extract_date_time_behavior(attribute: AttributeMetadata, result: FieldRecord) -> None:
    behavior = getattr(attribute, "date_time_behavior", None)
    if result.field_type != AttributeTypeCode.datetime or not behavior:
        return

    parsed = parse_date_time_behavior(behavior)
    if not parsed.ok:
        logger.warning(
            "[Mapping:Constraints] Ignoring date-time behavior of %s: %s", result.logical_name, parsed.error
        )
        return
    result.date_time_behavior = parsed.value


def extract_lookup(attribute: AttributeMetadata, result: FieldRecord) -> None:
    targets = getattr(attribute, "targets", None)
    if targets is None:
        # Target list not part of this descriptor; keep what we resolved before
        return
    result.lookup_data = LookupData(single_target_type=targets[0] if len(targets) == 1 else None)


ConstraintExtractor = Callable[[AttributeMetadata, FieldRecord], None]

CONSTRAINT_EXTRACTORS: Dict[AttributeKind, ConstraintExtractor] = {
    AttributeKind.lookup: extract_lookup,
    AttributeKind.datetime: extract_date_time_behavior,
    AttributeKind.string: extract_max_length,
    AttributeKind.memo: extract_max_length,
    AttributeKind.integer: extract_range,
    AttributeKind.decimal: extract_range,
    AttributeKind.money: extract_widened_range,
    AttributeKind.double: extract_widened_range,
    AttributeKind.image: extract_image_limits,
}


def attribute_kind(attribute: AttributeMetadata) -> AttributeKind:
    try:
        return AttributeKind(attribute.kind)
    except ValueError:
        return AttributeKind.other


def extract_constraints(attribute: AttributeMetadata, result: FieldRecord) -> None:
    """Run the extractor registered for the descriptor's kind, if any."""
    extractor = CONSTRAINT_EXTRACTORS.get(attribute_kind(attribute))
    if extractor is not None:
        extractor(attribute, result)
