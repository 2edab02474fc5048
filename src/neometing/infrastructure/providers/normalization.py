"""Tolerant extraction of track records from upstream JSON.

Hey future me - upstream song arrays routinely contain deleted or half-filled
entries. Those are NOT errors: extract_track_ref returns None and callers skip
the element. Only required top-level fields abort an operation.
"""

from typing import Any

from neometing.domain.dtos import TrackRef

# Shown in NoFieldError when the first/required record can't be normalized.
TRACK_REF_FIELDS = ".id as u64 | .name as str"


def as_unsigned(value: Any) -> int | None:
    """Return value if it is a non-negative JSON integer, else None."""
    # bool is an int subclass, JSON true/false are not ids
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def join_artists(artists: Any) -> str:
    """Join artist names with "/", skipping entries without a usable name."""
    if not isinstance(artists, list):
        return ""
    names = [
        artist["name"]
        for artist in artists
        if isinstance(artist, dict) and isinstance(artist.get("name"), str) and artist["name"]
    ]
    return "/".join(names)


def extract_track_ref(record: Any) -> TrackRef | None:
    """Extract id, title and artists from a song object.

    Args:
        record: One element of an upstream ``songs`` array

    Returns:
        TrackRef, or None if id/name are missing or mistyped
    """
    if not isinstance(record, dict):
        return None
    track_id = as_unsigned(record.get("id"))
    name = record.get("name")
    if track_id is None or not isinstance(name, str):
        return None
    return TrackRef(id=str(track_id), title=name, artists=join_artists(record.get("ar")))


def extract_track_refs(records: list[Any]) -> list[TrackRef]:
    """Normalize an array, dropping malformed elements and keeping order."""
    refs = []
    for record in records:
        ref = extract_track_ref(record)
        if ref is not None:
            refs.append(ref)
    return refs
