"""NetEase Cloud Music provider.

Hey future me - this composes everything: payload → WeapiEncoder → NeteaseClient
→ raw JSON → normalization → SongLinks. Error mapping rules:

- RequestError (transport) → RemoteError (ServerError for search, see ErrorKind)
- WeapiEncodeError → EncodeError
- missing/mistyped REQUIRED fields → NoFieldError / TypeMismatchError
- malformed elements inside song arrays → silently skipped

Playlists can hold thousands of tracks, so song details are fetched in
batches of 512 ids, all batches concurrently (bounded by the client's permit
pool), each batch wrapped in retry(). Batches are awaited in creation order so
the result order is deterministic. A batch that still fails after its retries
is dropped, the playlist is returned without those songs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from neometing.domain.dtos import SearchOptions, SongLinks, SongRecord
from neometing.domain.exceptions import (
    EncodeError,
    MetingError,
    NoFieldError,
    NotFoundError,
    RemoteError,
    ServerError,
    TypeMismatchError,
)
from neometing.domain.ports import IMusicProvider
from neometing.infrastructure.integrations.netease_client import (
    NeteaseClient,
    RequestError,
)
from neometing.infrastructure.integrations.weapi import (
    SignedEnvelope,
    WeapiEncodeError,
    WeapiEncoder,
)
from neometing.infrastructure.providers import netease_payloads as payloads
from neometing.infrastructure.providers.normalization import (
    TRACK_REF_FIELDS,
    as_unsigned,
    extract_track_ref,
    extract_track_refs,
)
from neometing.infrastructure.retry import retry

logger = logging.getLogger(__name__)

PLAYLIST_URL = "https://music.163.com/weapi/v6/playlist/detail"
SONG_INFO_URL = "https://music.163.com/weapi/v3/song/detail"
SONG_URL = "https://music.163.com/weapi/song/enhance/player/url"
LRC_URL = "https://music.163.com/weapi/song/lyric"
SEARCH_URL = "https://music.163.com/weapi/cloudsearch/pc"

ITEMS_PER_REQUEST = 512
ENCODER_NAME = "netease"
NO_LYRIC = "[00:00.00]暂无歌词"

_U64_MAX = 2**64 - 1


def _parse_id(id: str) -> int:
    if not (id.isascii() and id.isdigit()) or int(id) > _U64_MAX:
        raise TypeMismatchError("<id>", "u64")
    return int(id)


def _require_list(container: Any, key: str, path: str) -> list[Any]:
    value = container.get(key) if isinstance(container, dict) else None
    if value is None:
        raise NoFieldError(path)
    if not isinstance(value, list):
        raise TypeMismatchError(path, "array")
    return value


def _force_https(url: str) -> str:
    if url.startswith("http://"):
        return "https://" + url[len("http://") :]
    return url


def _encode(plaintext: str) -> SignedEnvelope:
    try:
        return WeapiEncoder.encode(plaintext)
    except WeapiEncodeError as e:
        raise EncodeError(ENCODER_NAME, str(e)) from e


class NeteaseProvider(IMusicProvider):
    """Provider backed by the NetEase weapi endpoints."""

    def __init__(self, client: NeteaseClient) -> None:
        self.client = client

    @property
    def name(self) -> str:
        return "netease"

    async def close(self) -> None:
        await self.client.close()

    async def _request(
        self,
        endpoint: str,
        plaintext: str,
        error_type: type[MetingError] = RemoteError,
    ) -> dict[str, Any]:
        envelope = _encode(plaintext)
        try:
            return await self.client.execute(endpoint, envelope)
        except RequestError as e:
            raise error_type(str(e)) from e

    async def _song_detail(self, id: str) -> list[Any]:
        data = await self._request(
            SONG_INFO_URL, payloads.song_detail_payload([_parse_id(id)])
        )
        return _require_list(data, "songs", ".songs")

    # =========================================================================
    # SINGLE TRACK LOOKUPS
    # =========================================================================

    async def resolve_playback_url(self, id: str) -> str:
        data = await self._request(SONG_URL, payloads.song_file_payload(id))
        entries = _require_list(data, "data", ".data")
        if not entries:
            raise NotFoundError(f"no playable file for {id}")

        entry = entries[0]
        if not isinstance(entry, dict):
            raise TypeMismatchError(".data.0", "object")

        code = entry.get("code")
        if code is None:
            raise NoFieldError(".data.0.code")
        if as_unsigned(code) is None:
            raise TypeMismatchError(".data.0.code", "u64")
        if code != 200:
            raise NotFoundError(f"upstream answered code {code} for {id}")

        url = entry.get("url")
        if url is None and isinstance(entry.get("uf"), dict):
            url = entry["uf"].get("url")
        if url is None:
            raise NoFieldError(".data.0.url / .data.0.uf.url")
        if not isinstance(url, str):
            raise TypeMismatchError(".data.0.url / .data.0.uf.url", "str")
        if not url:
            raise NotFoundError(f"empty playback url for {id}")
        return _force_https(url)

    async def resolve_cover(self, id: str) -> str:
        songs = await self._song_detail(id)
        album = songs[0].get("al") if songs and isinstance(songs[0], dict) else None
        pic = album.get("picUrl") if isinstance(album, dict) else None
        if pic is None:
            raise NoFieldError(".songs.0.al.picUrl")
        if not isinstance(pic, str):
            raise TypeMismatchError(".songs.0.al.picUrl", "str")
        return pic

    async def resolve_lyrics(self, id: str) -> str:
        data = await self._request(LRC_URL, payloads.lyric_payload(id))
        lrc = data.get("lrc")
        lyric = lrc.get("lyric") if isinstance(lrc, dict) else None
        if isinstance(lyric, str) and lyric:
            return lyric
        return NO_LYRIC

    async def get_song(self, id: str, links: SongLinks) -> SongRecord:
        songs = await self._song_detail(id)
        if not songs:
            raise NotFoundError(f"song {id} not found")
        ref = extract_track_ref(songs[0])
        if ref is None:
            raise NoFieldError(TRACK_REF_FIELDS)
        return links.build(ref)

    # =========================================================================
    # COLLECTIONS
    # =========================================================================

    async def _fetch_batch(self, envelope: SignedEnvelope, retry_limit: int) -> dict[str, Any]:
        def on_error(e: Exception) -> None:
            logger.warning("Song detail batch failed, retrying: %s", e)

        return await retry(
            retry_limit,
            envelope,
            lambda env: self.client.execute(SONG_INFO_URL, env),
            on_error,
            retry_on=(RequestError,),
        )

    async def get_playlist(
        self, id: str, retry_limit: int, links: SongLinks
    ) -> list[SongRecord]:
        data = await self._request(PLAYLIST_URL, payloads.playlist_payload(id))
        playlist = data.get("playlist")
        track_ids = _require_list(playlist, "trackIds", ".playlist.trackIds")

        ids = [
            song_id
            for song_id in (
                as_unsigned(item.get("id")) for item in track_ids if isinstance(item, dict)
            )
            if song_id is not None
        ]
        if not ids:
            return []

        envelopes: list[SignedEnvelope] = []
        for start in range(0, len(ids), ITEMS_PER_REQUEST):
            batch = ids[start : start + ITEMS_PER_REQUEST]
            try:
                envelopes.append(WeapiEncoder.encode(payloads.song_detail_payload(batch)))
            except WeapiEncodeError as e:
                logger.warning(
                    "Skipping %d tracks of playlist %s, encoding failed: %s",
                    len(batch),
                    id,
                    e,
                )

        tasks = [
            asyncio.create_task(self._fetch_batch(envelope, retry_limit))
            for envelope in envelopes
        ]
        logger.debug("Playlist %s: %d tracks in %d batches", id, len(ids), len(tasks))

        songs: list[SongRecord] = []
        try:
            for index, task in enumerate(tasks):
                try:
                    detail = await task
                except RequestError as e:
                    logger.warning(
                        "Dropping batch %d of playlist %s after %d attempt(s): %s",
                        index,
                        id,
                        retry_limit + 1,
                        e,
                    )
                    continue
                records = _require_list(detail, "songs", "<song-detail>.songs")
                songs.extend(links.build(ref) for ref in extract_track_refs(records))
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return songs

    async def search(
        self, keyword: str, options: SearchOptions, links: SongLinks
    ) -> list[SongRecord]:
        data = await self._request(
            SEARCH_URL, payloads.search_payload(keyword, options), error_type=ServerError
        )
        records = _require_list(data.get("result"), "songs", ".result.songs")
        return [links.build(ref) for ref in extract_track_refs(records)]
