from __future__ import annotations

import pytest

from core.dedup import derive_dedup_key, entry_key_from_identity
from core.errors import ParseError


def test_entry_key_is_the_date_fragment() -> None:
    identity = "tag:google.com,2016:run-release-notes#June_18_2024"
    assert entry_key_from_identity(identity) == "June_18_2024"


def test_identity_without_fragment_is_used_whole() -> None:
    assert entry_key_from_identity("urn:uuid:1234") == "urn:uuid:1234"


def test_only_the_first_fragment_segment_is_kept() -> None:
    assert entry_key_from_identity("feed#a#b") == "a"


def test_derive_key_is_namespaced_by_kind() -> None:
    key, entry_key = derive_dedup_key("x#May_01_2024", "CloudRunReleaseNote")
    assert key == "CloudRunReleaseNote/May_01_2024"
    assert entry_key == "May_01_2024"


@pytest.mark.parametrize("identity", ["feed#", "feed#   ", ""])
def test_empty_key_is_rejected(identity: str) -> None:
    with pytest.raises(ParseError):
        entry_key_from_identity(identity)
