"""Plaintext payloads for NetEase weapi endpoints.

Each builder returns the compact JSON text that goes into WeapiEncoder.encode.
Key order matters for nothing upstream, but we keep it stable for tests.

The lyric request sends its role flag as "showRole", the name the web client
uses. Older Meting ports send it as "camleCase" (a rename slip); the upstream
ignores unknown keys either way.
"""

import json
from typing import Any

from neometing.domain.dtos import SearchOptions

# Remember the * 1000, the upstream answers with no data (and we with 502) otherwise
MUSIC_QUALITY = 320 * 1000


def _dumps(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def song_file_payload(id: str, bitrate: int = MUSIC_QUALITY) -> str:
    """Playback URL request."""
    return _dumps({"ids": [id], "br": bitrate})


def song_detail_payload(ids: list[int]) -> str:
    """Song detail request. ``c`` is itself a JSON string."""
    return _dumps({"c": _dumps([{"id": song_id, "v": 0} for song_id in ids])})


def playlist_payload(id: str) -> str:
    """Playlist detail request returning every track id."""
    return _dumps(
        {"id": id, "offset": "0", "total": "True", "limit": "9999", "n": "9999"}
    )


def lyric_payload(id: str) -> str:
    """Lyric request for every lyric flavour."""
    return _dumps(
        {
            "id": id,
            "os": "pc",
            "lv": -1,
            "kv": -1,
            "tv": -1,
            "rv": -1,
            "yv": 1,
            "showRole": "False",
            "cp": "False",
            "e_r": "False",
        }
    )


def search_payload(keyword: str, options: SearchOptions) -> str:
    """Paged cloud search request."""
    return _dumps(
        {
            "s": keyword,
            "type": options.type,
            "limit": options.limit,
            "total": True,
            "offset": options.offset,
        }
    )
