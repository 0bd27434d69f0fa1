"""Bucket pending updates into critical, optional and hidden."""

from __future__ import annotations

from collections.abc import Iterable

from winupdate_probe.models import Classification, UpdateRecord


def classify(records: Iterable[UpdateRecord]) -> Classification:
    """Classify pending updates.

    Each record lands in exactly one bucket, checked in this order:
    hidden, then auto-selectable (counted as critical), then optional.
    Critical titles are kept in encounter order, wrapped in brackets.

    Args:
        records: Pending updates from the inventory source. May be empty.

    Returns:
        Classification whose counts sum to the number of records.
    """
    critical = 0
    optional = 0
    hidden = 0
    titles: list[str] = []

    for record in records:
        if record.is_hidden:
            hidden += 1
        elif record.is_auto_selectable:
            critical += 1
            titles.append(f"[{record.title}]")
        else:
            optional += 1

    return Classification(
        critical_count=critical,
        optional_count=optional,
        hidden_count=hidden,
        critical_titles=titles,
    )
