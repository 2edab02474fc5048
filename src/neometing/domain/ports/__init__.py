"""
Music provider interface.

Hey future me – this is THE capability set every provider exposes!
Each operation defaults to UnimplementedError, so a provider only overrides
what its upstream actually supports. The front-end then reports 501 instead
of silently returning wrong data.
"""

from abc import ABC, abstractmethod

from neometing.domain.dtos import SearchOptions, SongLinks, SongRecord
from neometing.domain.exceptions import UnimplementedError


class IMusicProvider(ABC):
    """Abstract base class for music providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name, also used as the route prefix (e.g. "netease")."""
        ...

    def _unimplemented(self, operation: str) -> UnimplementedError:
        return UnimplementedError(operation, self.name)

    async def resolve_playback_url(self, id: str) -> str:
        """Resolve a track id to a directly playable URL."""
        raise self._unimplemented("resolve_playback_url")

    async def resolve_cover(self, id: str) -> str:
        """Resolve a track id to its cover image URL."""
        raise self._unimplemented("resolve_cover")

    async def resolve_lyrics(self, id: str) -> str:
        """Resolve a track id to LRC lyric text."""
        raise self._unimplemented("resolve_lyrics")

    async def get_song(self, id: str, links: SongLinks) -> SongRecord:
        """Fetch a single song."""
        raise self._unimplemented("get_song")

    async def get_artist(self, id: str, links: SongLinks) -> list[SongRecord]:
        """Fetch the songs of an artist."""
        raise self._unimplemented("get_artist")

    async def get_playlist(
        self, id: str, retry_limit: int, links: SongLinks
    ) -> list[SongRecord]:
        """Fetch every song of a playlist."""
        raise self._unimplemented("get_playlist")

    async def search(
        self, keyword: str, options: SearchOptions, links: SongLinks
    ) -> list[SongRecord]:
        """Search songs by keyword."""
        raise self._unimplemented("search")

    async def close(self) -> None:
        """Release transport resources. Providers without any may ignore this."""
        return None


__all__ = ["IMusicProvider"]
