from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Artist(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str


class ArtistCredits(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    items: List[Artist] = Field(alias="list")
    formatted: str


class Track(BaseModel):
    """One selectable option in the daily game, as served to the client."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    name: str
    formatted: str
    year: int
    preview_url: str = Field(alias="previewUrl")
    img_src: Optional[str] = Field(default=None, alias="imgSrc")
    artists: ArtistCredits


class Playlist(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class SelectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    answer: Track
    options: List[Track]
    playlist: Playlist

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class PlaylistImage(BaseModel):
    url: str


class PlaylistOwner(BaseModel):
    display_name: str


class PlaylistSummary(BaseModel):
    id: str
    images: List[PlaylistImage]
    name: str
    description: str
    owner: PlaylistOwner


class PlaylistPage(BaseModel):
    items: List[PlaylistSummary]
    offset: int
    total: int


class SearchPlaylistsResponse(BaseModel):
    playlists: PlaylistPage

    @classmethod
    def single(cls, summary: PlaylistSummary) -> "SearchPlaylistsResponse":
        return cls(playlists=PlaylistPage(items=[summary], offset=0, total=1))

    def to_payload(self) -> dict:
        return self.model_dump()


def build_track(
    track_id,
    name: str,
    artists: List[Artist],
    year: int,
    preview_url: str,
    img_src: Optional[str],
) -> Track:
    # Shared by every provider adapter so "formatted" is built the same way.
    formatted_artists = ", ".join(a.name for a in artists)
    return Track(
        id=track_id,
        name=name,
        formatted=f"{formatted_artists} - {name}",
        year=year,
        previewUrl=preview_url,
        imgSrc=img_src,
        artists=ArtistCredits(list=artists, formatted=formatted_artists),
    )
