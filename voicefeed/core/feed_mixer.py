"""Merge original and reposted voice notes into one feed sequence.

Both inputs arrive already sorted newest first (originals by ``created_at``,
shares by ``shared_at``). Nothing here re-sorts; the interleaver only decides,
item by item, which stream to draw from next.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from voicefeed.core.records import FeedEntry, ShareRecord, UserIdentity, VoiceNoteRecord

DEFAULT_TARGET_ORIGINAL_RATIO = 0.6

T = TypeVar("T")


def build_original_entries(notes: Sequence[VoiceNoteRecord]) -> list[FeedEntry]:
    return [FeedEntry(note=note) for note in notes]


def build_shared_entry(
    note: VoiceNoteRecord,
    share: ShareRecord,
    sharer: UserIdentity | None,
) -> FeedEntry | None:
    # an author resharing their own note is already covered by the original listing
    sharer_id = sharer.id if sharer else share.user_id
    if sharer_id == note.user_id:
        return None
    return FeedEntry(note=note, is_shared=True, shared_at=share.shared_at, shared_by=sharer)


def dedupe_shared(original: Sequence[FeedEntry], shared: Sequence[FeedEntry]) -> list[FeedEntry]:
    seen = {entry.note.id for entry in original}
    kept: list[FeedEntry] = []
    for entry in shared:
        if entry.note.id in seen:
            continue
        seen.add(entry.note.id)
        kept.append(entry)
    return kept


def interleave_balanced(
    original: Sequence[FeedEntry],
    shared: Sequence[FeedEntry],
    target_ratio: float = DEFAULT_TARGET_ORIGINAL_RATIO,
) -> list[FeedEntry]:
    """Merge the two streams so the running share of originals tracks ``target_ratio``.

    The ratio is measured over everything emitted so far. Once one stream is
    exhausted the remainder of the other is appended in order, so the target is
    a soft one.
    """
    if not 0.0 <= target_ratio <= 1.0:
        raise ValueError(f"target_ratio must be between 0 and 1, got {target_ratio}")

    result: list[FeedEntry] = []
    original_count = 0
    i = 0
    j = 0
    while i < len(original) or j < len(shared):
        current_ratio = original_count / len(result) if result else 0.0
        want_original = (current_ratio < target_ratio and i < len(original)) or j >= len(shared)
        if want_original and i < len(original):
            result.append(original[i])
            original_count += 1
            i += 1
        elif j < len(shared):
            result.append(shared[j])
            j += 1
        else:
            break
    return result


def paginate(items: Sequence[T], page: int, limit: int) -> list[T]:
    if page < 1 or limit < 1:
        return []
    start = (page - 1) * limit
    return list(items[start : start + limit])
