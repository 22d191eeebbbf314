from __future__ import annotations

import pytest

from core.errors import EmptyFeedError, ParseError
from core.feed_parser import parse_entry, parse_feed
from feed_samples import ENTRY_ID_PREFIX, atom_feed, release_body


def test_parses_entries_in_source_order() -> None:
    feed = parse_feed(
        atom_feed(
            [
                ("June_18_2024", release_body(features=1)),
                ("June_11_2024", release_body(fixes=1)),
            ]
        )
    )

    assert feed.feed_id == ENTRY_ID_PREFIX
    assert feed.title == "Cloud Run - Release notes"
    assert feed.author == "Google Cloud Platform"
    assert [entry.identity for entry in feed.entries] == [
        f"{ENTRY_ID_PREFIX}#June_18_2024",
        f"{ENTRY_ID_PREFIX}#June_11_2024",
    ]


def test_latest_entry_fields() -> None:
    feed = parse_feed(atom_feed([("June_18_2024", release_body(features=2, fixes=1))]))
    latest = feed.latest()

    assert latest.title == "June 18 2024"
    assert latest.published_at
    assert latest.link == "https://cloud.google.com/run/docs/release-notes#June_18_2024"
    assert "html" in latest.content_type
    assert latest.content_body.lower().count(">feature<") == 2
    assert latest.content_body.lower().count(">fixed<") == 1


def test_empty_feed_raises_on_latest() -> None:
    feed = parse_feed(atom_feed([]))

    assert feed.entries == ()
    with pytest.raises(EmptyFeedError):
        feed.latest()


def test_garbage_document_is_a_parse_error() -> None:
    with pytest.raises(ParseError):
        parse_feed(b"this is not a feed at all")


def test_entry_without_id_is_rejected() -> None:
    with pytest.raises(ParseError):
        parse_entry({"title": "untitled"})


def test_summary_is_used_when_content_missing() -> None:
    entry = parse_entry(
        {
            "id": "x#May_01_2024",
            "title": "May 01 2024",
            "summary": "<h3>Fixed</h3>",
            "summary_detail": {"type": "text/html"},
        }
    )
    assert entry.content_body == "<h3>Fixed</h3>"
    assert entry.content_type == "text/html"
    assert entry.link == ""
