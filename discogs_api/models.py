"""Shapes of the dictionaries returned by the Discogs client.

Keys declared in a ``total=False`` class are optional: they are only present
when the matching XML node was part of the response.
"""

from __future__ import annotations

from typing import List, Optional, TypedDict


class Image(TypedDict):
    type: str
    width: int
    height: int
    url: str
    thumb_url: str


class ArtistCredit(TypedDict):
    name: str


class ExtraArtistCredit(TypedDict):
    name: str
    role: str


class LabelCredit(TypedDict):
    name: str
    catno: str


class FormatInfo(TypedDict):
    name: str
    qty: str
    description: str


class _TrackBase(TypedDict):
    position: str
    title: str
    duration: str


class Track(_TrackBase, total=False):
    extra_artists: List[ExtraArtistCredit]


class Release(TypedDict):
    id: str
    status: str
    title: str
    genre: str
    country: str
    released: str
    notes: str
    images: List[Image]
    artists: List[ArtistCredit]
    extra_artists: List[ExtraArtistCredit]
    labels: List[LabelCredit]
    formats: List[FormatInfo]
    styles: List[str]
    tracklist: List[Track]


class ArtistRelease(TypedDict):
    id: str
    status: str
    type: str
    title: str
    format: str
    label: str
    year: str


class _ArtistBase(TypedDict):
    name: str
    real_name: str


class Artist(_ArtistBase, total=False):
    urls: List[str]
    name_variations: List[str]
    aliases: List[str]
    images: List[Image]
    releases: List[ArtistRelease]


class LabelRelease(TypedDict):
    id: str
    status: str
    catno: str
    artist: str
    title: str
    format: str


class _LabelBase(TypedDict):
    name: str
    profile: str
    contact_info: str


class Label(_LabelBase, total=False):
    parent_label: str
    sublabels: List[str]
    images: List[Image]
    releases: List[LabelRelease]


class _SearchRowBase(TypedDict):
    title: str
    url: str
    type: str


class SearchRow(_SearchRowBase, total=False):
    summary: str
    id: str


class SearchResult(TypedDict):
    exact_results: List[SearchRow]
    search_results: List[SearchRow]


def coerce_int(value: str | None) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


__all__ = [
    "Artist",
    "ArtistCredit",
    "ArtistRelease",
    "ExtraArtistCredit",
    "FormatInfo",
    "Image",
    "Label",
    "LabelCredit",
    "LabelRelease",
    "Release",
    "SearchResult",
    "SearchRow",
    "Track",
    "coerce_int",
]
