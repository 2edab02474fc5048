"""Provider endpoints.

Hey future me - every route here is `/{provider}/<operation>/{id}`. The pic and
url routes REDIRECT to the upstream asset; song/playlist/search return records
whose pic/lrc/url fields point back at these same routes (see
dependencies.get_song_links), so players resolve assets lazily, one per click.

Errors are not handled here at all - providers raise MetingError subclasses and
api/exception_handlers.py turns them into status codes.
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, RedirectResponse
from pydantic import BaseModel, Field

from neometing.api.dependencies import get_app_settings, get_provider, get_song_links
from neometing.config import Settings
from neometing.domain.dtos import SearchOptions, SongLinks, SongRecord
from neometing.domain.ports import IMusicProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/{provider}", tags=["Meting"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================


class SongResponse(BaseModel):
    """Song record as returned to players."""

    name: str = Field(..., description="Track title")
    artist: str = Field(..., description="Artists joined with '/'")
    url: str = Field(..., description="Link resolving to the playback URL")
    pic: str = Field(..., description="Link resolving to the cover image")
    lrc: str = Field(..., description="Link resolving to LRC lyrics")

    @classmethod
    def from_record(cls, record: SongRecord) -> "SongResponse":
        return cls(**record.to_dict())


# =============================================================================
# ASSET ENDPOINTS
# =============================================================================


@router.get("/pic/{id}", response_class=RedirectResponse, status_code=302)
async def get_pic(id: str, source: IMusicProvider = Depends(get_provider)) -> RedirectResponse:
    """Redirect to the cover image of a track."""
    return RedirectResponse(await source.resolve_cover(id), status_code=302)


@router.get("/url/{id}", response_class=RedirectResponse, status_code=302)
async def get_url(id: str, source: IMusicProvider = Depends(get_provider)) -> RedirectResponse:
    """Redirect to the playable file of a track."""
    return RedirectResponse(await source.resolve_playback_url(id), status_code=302)


@router.get("/lrc/{id}", response_class=PlainTextResponse)
async def get_lrc(id: str, source: IMusicProvider = Depends(get_provider)) -> str:
    """LRC lyrics of a track."""
    return await source.resolve_lyrics(id)


# =============================================================================
# RECORD ENDPOINTS
# =============================================================================


@router.get("/song/{id}", response_model=SongResponse)
async def get_song(
    id: str,
    source: IMusicProvider = Depends(get_provider),
    links: SongLinks = Depends(get_song_links),
) -> SongResponse:
    """A single song."""
    return SongResponse.from_record(await source.get_song(id, links))


@router.get("/playlist/{id}", response_model=list[SongResponse])
async def get_playlist(
    id: str,
    source: IMusicProvider = Depends(get_provider),
    links: SongLinks = Depends(get_song_links),
    settings: Settings = Depends(get_app_settings),
) -> list[SongResponse]:
    """Every song of a playlist. Batches that keep failing are left out."""
    songs = await source.get_playlist(id, settings.netease.playlist_retry_limit, links)
    logger.debug("Playlist %s resolved to %d songs", id, len(songs))
    return [SongResponse.from_record(song) for song in songs]


@router.get("/artist/{id}", response_model=list[SongResponse])
async def get_artist(
    id: str,
    source: IMusicProvider = Depends(get_provider),
    links: SongLinks = Depends(get_song_links),
) -> list[SongResponse]:
    """Songs of an artist."""
    return [SongResponse.from_record(song) for song in await source.get_artist(id, links)]


@router.get("/search/{keyword:path}", response_model=list[SongResponse])
async def search(
    keyword: str,
    limit: int = Query(30, ge=0, le=100, description="Results per page"),
    page: int = Query(1, ge=0, description="1-based page, 0 is treated as 1"),
    type: int = Query(0, ge=0, description="Upstream search type"),
    source: IMusicProvider = Depends(get_provider),
    links: SongLinks = Depends(get_song_links),
) -> list[SongResponse]:
    """Keyword search."""
    options = SearchOptions(limit=limit, page=page, type=type)
    return [
        SongResponse.from_record(song)
        for song in await source.search(keyword, options, links)
    ]
