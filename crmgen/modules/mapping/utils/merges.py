#  Copyright (C) 2010-2026 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

from typing import Any, Callable, Iterable, Optional, Tuple

# (source attribute on the raw descriptor, target attribute on the field record)
CopyRule = Tuple[str, str]


def merge_if_present(target: Any, attr: str, value: Any, convert: Optional[Callable[[Any], Any]] = None) -> bool:
    """
    Overwrite target.attr only when value is present (not None).
    Returns True when the target was written.
    """
    if value is None:
        return False
    setattr(target, attr, convert(value) if convert else value)
    return True


def first_present(*values: Any) -> Any:
    """First value that is not None, else None."""
    for value in values:
        if value is not None:
            return value
    return None


def apply_copy_rules(source: Any, target: Any, rules: Iterable[CopyRule]) -> None:
    """Copy each source attribute onto the target when the source carries a value."""
    for source_attr, target_attr in rules:
        merge_if_present(target, target_attr, getattr(source, source_attr, None))
