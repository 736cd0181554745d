"""Row locking helpers for read-check-write sequences."""

from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore


def lock_for_update(queryset):
    """Apply select_for_update when inside transaction.atomic().

    Outside a transaction the lock would be released immediately, so the
    queryset is returned unchanged. Backends without row locks (SQLite)
    serialize writers on the database file instead.
    """
    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def lock_row(model, pk):
    """Fetch one row, locking it until the surrounding transaction ends."""
    return lock_for_update(model.objects.filter(pk=pk)).get()
