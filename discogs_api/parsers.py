"""XML parsers projecting Discogs API documents into plain dictionaries."""

from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import unquote_plus

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import CData, NavigableString, Tag
from lxml import etree

from .models import (
    Artist,
    ArtistCredit,
    ArtistRelease,
    ExtraArtistCredit,
    FormatInfo,
    Image,
    Label,
    LabelCredit,
    LabelRelease,
    Release,
    SearchResult,
    SearchRow,
    Track,
    coerce_int,
)


logger = logging.getLogger(__name__)


ENVELOPE = "resp"
ID_TYPES = ("artist", "label", "release")

_STRICT_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def parse_document(markup: bytes | str) -> Optional[BeautifulSoup]:
    """Parse ``markup`` as XML, returning ``None`` unless it is well-formed."""

    if not markup or not markup.strip():
        return None
    data = markup.encode("utf-8") if isinstance(markup, str) else markup
    try:
        etree.fromstring(data, _STRICT_PARSER)
        soup = BeautifulSoup(data, "xml")
    except (ParserRejectedMarkup, etree.XMLSyntaxError) as exc:
        logger.debug("XML parser rejected payload: %s", exc)
        return None
    if soup.find(True, recursive=False) is None:
        return None
    return soup


def extract_error_message(markup: bytes | str) -> Optional[str]:
    """Return the text of the ``<error>`` element, if the body has one."""

    document = parse_document(markup)
    if document is None:
        return None
    error = find_root(document, "error")
    if error is None:
        return None
    return _text(error)


def find_root(document: BeautifulSoup, name: str) -> Optional[Tag]:
    """Locate ``<name>`` as the document element or as a child of ``<resp>``."""

    top = document.find(True, recursive=False)
    if top is None:
        return None
    if top.name == name:
        return top
    return top.find(name, recursive=False)


def parse_release(root: Tag) -> Release:
    extra_artists = _child(root, "extraartists")
    tracklist = [_parse_track(track) for track in _children(root, "tracklist", "track")]

    release: Release = {
        "id": root.get("id", ""),
        "status": root.get("status", ""),
        "title": _child_text(root, "title"),
        "genre": _child_text(root, "genres", "genre"),
        "country": _child_text(root, "country"),
        "released": _child_text(root, "released"),
        "notes": _child_text(root, "notes"),
        "images": [_parse_image(image) for image in _children(root, "images", "image")],
        "artists": [
            ArtistCredit(name=_child_text(artist, "name"))
            for artist in _children(root, "artists", "artist")
        ],
        "extra_artists": _parse_extra_artists(extra_artists),
        "labels": [
            LabelCredit(name=label.get("name", ""), catno=label.get("catno", ""))
            for label in _children(root, "labels", "label")
        ],
        "formats": [
            FormatInfo(
                name=fmt.get("name", ""),
                qty=fmt.get("qty", ""),
                description=_child_text(fmt, "descriptions", "description"),
            )
            for fmt in _children(root, "formats", "format")
        ],
        "styles": [_text(style) for style in _children(root, "styles", "style")],
        "tracklist": tracklist,
    }
    logger.debug(
        "Parsed release %s with %d tracks", release["id"], len(release["tracklist"])
    )
    return release


def parse_artist(root: Tag) -> Artist:
    artist: Artist = {
        "name": _child_text(root, "name"),
        "real_name": _child_text(root, "realname"),
    }

    urls = _children(root, "urls", "url")
    if urls:
        artist["urls"] = [u for u in (_text(url).strip() for url in urls) if u]

    variations = _children(root, "namevariations", "name")
    if variations:
        artist["name_variations"] = [_text(name) for name in variations]

    aliases = _children(root, "aliases", "name")
    if aliases:
        artist["aliases"] = [_text(name) for name in aliases]

    images = _children(root, "images", "image")
    if images:
        artist["images"] = [_parse_image(image) for image in images]

    releases = _children(root, "releases", "release")
    if releases:
        artist["releases"] = [
            ArtistRelease(
                id=release.get("id", ""),
                status=release.get("status", ""),
                type=release.get("type", ""),
                title=_child_text(release, "title"),
                format=_child_text(release, "format"),
                label=_child_text(release, "label"),
                year=_child_text(release, "year"),
            )
            for release in releases
        ]

    return artist


def parse_label(root: Tag) -> Label:
    label: Label = {
        "name": _child_text(root, "name"),
        "profile": _child_text(root, "profile"),
        "contact_info": _child_text(root, "contactinfo"),
    }

    parent = _child(root, "parentLabel")
    if parent is not None:
        label["parent_label"] = _text(parent)

    sublabels = _children(root, "sublabels", "label")
    if sublabels:
        label["sublabels"] = [_text(sublabel) for sublabel in sublabels]

    images = _children(root, "images", "image")
    if images:
        label["images"] = [_parse_image(image) for image in images]

    releases = _children(root, "releases", "release")
    if releases:
        label["releases"] = [
            LabelRelease(
                id=release.get("id", ""),
                status=release.get("status", ""),
                catno=_child_text(release, "catno"),
                artist=_child_text(release, "artist"),
                title=_child_text(release, "title"),
                format=_child_text(release, "format"),
            )
            for release in releases
        ]

    return label


def parse_search_results(document: BeautifulSoup) -> SearchResult:
    top = document.find(True, recursive=False)
    container = top if top is not None and top.name == ENVELOPE else document

    exact = [
        _parse_search_row(result, with_summary=False)
        for result in _children(container, "exactresults", "result")
    ]
    found = [
        _parse_search_row(result, with_summary=True)
        for result in _children(container, "searchresults", "result")
    ]
    logger.debug(
        "Search returned %d exact and %d other results", len(exact), len(found)
    )
    return {"exact_results": exact, "search_results": found}


def id_from_url(url: str, result_type: str) -> Optional[str]:
    """Return the decoded part of ``url`` after ``<result_type>/``, if any."""

    if result_type not in ID_TYPES:
        return None
    marker = f"{result_type}/"
    _, found, tail = url.partition(marker)
    if not found:
        return None
    return unquote_plus(tail)


def _parse_search_row(result: Tag, *, with_summary: bool) -> SearchRow:
    row: SearchRow = {
        "title": _child_text(result, "title"),
        "url": _child_text(result, "uri"),
        "type": result.get("type", ""),
    }
    if with_summary:
        row["summary"] = _child_text(result, "summary")

    result_id = id_from_url(row["url"], row["type"])
    if result_id is not None:
        row["id"] = result_id
    return row


def _parse_track(track: Tag) -> Track:
    parsed: Track = {
        "position": _child_text(track, "position"),
        "title": _child_text(track, "title"),
        "duration": _child_text(track, "duration"),
    }
    extra_artists = _child(track, "extraartists")
    if _child(track, "extraartists", "artist") is not None:
        parsed["extra_artists"] = _parse_extra_artists(extra_artists)
    return parsed


def _parse_extra_artists(node: Optional[Tag]) -> List[ExtraArtistCredit]:
    if node is None:
        return []
    return [
        ExtraArtistCredit(
            name=_child_text(artist, "name"),
            role=_child_text(artist, "role"),
        )
        for artist in node.find_all("artist", recursive=False)
    ]


def _parse_image(image: Tag) -> Image:
    return Image(
        type=image.get("type", ""),
        width=coerce_int(image.get("width")) or 0,
        height=coerce_int(image.get("height")) or 0,
        url=image.get("uri", ""),
        thumb_url=image.get("uri150", ""),
    )


def _child(node: Tag, *path: str) -> Optional[Tag]:
    current: Optional[Tag] = node
    for name in path:
        if current is None:
            return None
        current = current.find(name, recursive=False)
    return current


def _children(node: Tag, container: str, name: str) -> List[Tag]:
    parent = _child(node, container)
    if parent is None:
        return []
    return parent.find_all(name, recursive=False)


def _child_text(node: Tag, *path: str) -> str:
    child = _child(node, *path)
    return _text(child) if child is not None else ""


def _text(node: Tag) -> str:
    return node.get_text(types=(NavigableString, CData))


__all__ = [
    "extract_error_message",
    "find_root",
    "id_from_url",
    "parse_artist",
    "parse_document",
    "parse_label",
    "parse_release",
    "parse_search_results",
]
