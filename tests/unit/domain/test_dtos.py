"""Tests for provider data objects."""

import dataclasses

import pytest

from neometing.domain.dtos import SearchOptions, SongLinks, SongRecord, TrackRef


@pytest.fixture
def links() -> SongLinks:
    """Link builders with a recognizable prefix per kind."""
    return SongLinks(
        pic=lambda id: f"pic:{id}",
        lrc=lambda id: f"lrc:{id}",
        url=lambda id: f"url:{id}",
    )


class TestSongLinks:
    """Test SongLinks.build."""

    def test_build_applies_each_link_function(self, links: SongLinks) -> None:
        """Test that every link field is computed from the track id."""
        record = links.build(TrackRef(id="42", title="Song", artists="A/B"))

        assert record == SongRecord(
            name="Song", artist="A/B", url="url:42", pic="pic:42", lrc="lrc:42"
        )

    def test_record_to_dict(self, links: SongLinks) -> None:
        """Test record serialization keys."""
        record = links.build(TrackRef(id="1", title="T", artists=""))
        assert record.to_dict() == {
            "name": "T",
            "artist": "",
            "url": "url:1",
            "pic": "pic:1",
            "lrc": "lrc:1",
        }

    def test_records_are_immutable(self) -> None:
        """Test that records are frozen."""
        ref = TrackRef(id="1", title="T", artists="")
        with pytest.raises(dataclasses.FrozenInstanceError):
            ref.title = "other"  # type: ignore[misc]


class TestSearchOptions:
    """Test search paging."""

    def test_defaults(self) -> None:
        """Test default limit, page and type."""
        options = SearchOptions()
        assert (options.limit, options.page, options.type) == (30, 1, 0)
        assert options.offset == 0

    @pytest.mark.parametrize(
        ("page", "offset"),
        [(0, 0), (1, 0), (2, 30), (5, 120)],
    )
    def test_offset(self, page: int, offset: int) -> None:
        """Test offset = (page - 1) * limit, page 0 acting as page 1."""
        assert SearchOptions(limit=30, page=page).offset == offset

    @pytest.mark.parametrize("field", ["limit", "page", "type"])
    def test_negative_values_rejected(self, field: str) -> None:
        """Test that negative options are rejected."""
        with pytest.raises(ValueError, match=field):
            SearchOptions(**{field: -1})
