"""
Standard data objects returned by every provider.

Hey future me – these are the LINGUA FRANCA between providers and the front-end!
Providers never hand out raw upstream JSON, only these records.

Flow: upstream JSON → TrackRef (normalized) → SongLinks.build → SongRecord
"""

from collections.abc import Callable
from dataclasses import asdict, dataclass

LinkFn = Callable[[str], str]


@dataclass(frozen=True)
class TrackRef:
    """Minimal track identity extracted from an upstream record."""

    id: str
    title: str
    artists: str  # "/"-joined artist names in upstream order


@dataclass(frozen=True)
class SongRecord:
    """
    Public song record.

    url, pic and lrc are links built by the caller (see SongLinks), not resolved
    upstream URLs. Dereferencing them triggers the actual lookup later.
    """

    name: str
    artist: str
    url: str
    pic: str
    lrc: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


# Hey future me – SongLinks is how the front-end injects its routing into providers
# WITHOUT providers knowing anything about routes. Three pure functions, id → link.
@dataclass(frozen=True)
class SongLinks:
    """Link builders applied to every track a provider returns."""

    pic: LinkFn
    lrc: LinkFn
    url: LinkFn

    def build(self, ref: TrackRef) -> SongRecord:
        """Turn a normalized track into a public record."""
        return SongRecord(
            name=ref.title,
            artist=ref.artists,
            url=self.url(ref.id),
            pic=self.pic(ref.id),
            lrc=self.lrc(ref.id),
        )


@dataclass(frozen=True)
class SearchOptions:
    """Paging options for keyword search.

    page is 1-based; page 0 is treated as page 1.
    """

    limit: int = 30
    page: int = 1
    type: int = 0

    def __post_init__(self) -> None:
        for name in ("limit", "page", "type"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    @property
    def offset(self) -> int:
        page = self.page if self.page > 0 else 1
        return (page - 1) * self.limit


__all__ = ["LinkFn", "SearchOptions", "SongLinks", "SongRecord", "TrackRef"]
