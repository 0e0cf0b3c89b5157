"""Tests for mapping parsed feed nodes to the domain model.

These exercise the pure mapping functions without any network access.
"""

from __future__ import annotations

import dataclasses
import warnings
from typing import Any

import pytest
from hypothesis import given, settings, strategies as st

from podkit.core.errors import FeedFormatError, MissingFieldError
from podkit.core.models import Category, Enclosure, Episode
from podkit.services.feed import (
    extract_channel,
    map_categories,
    map_channel,
    map_enclosure,
    map_episode,
    map_episodes,
    validate_channel,
)

label_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("L", "N", "Zs")), min_size=1, max_size=20
)


class TestMapCategories:
    """Tests for category flattening."""

    def test_single_category_without_subcategories(self) -> None:
        assert map_categories([{"@_text": "Technology"}]) == (Category(name="Technology"),)

    def test_category_with_subcategories(self) -> None:
        categories = [
            {
                "@_text": "Technology",
                "itunes:category": [
                    {"@_text": "Software How-To"},
                    {"@_text": "Gadgets"},
                ],
            },
        ]

        assert map_categories(categories) == (
            Category(name="Technology"),
            Category(name="Software How-To"),
            Category(name="Gadgets"),
        )

    def test_two_parents_with_one_child_each(self) -> None:
        categories = [
            {"@_text": "Technology", "itunes:category": {"@_text": "Software How-To"}},
            {"@_text": "Business", "itunes:category": {"@_text": "Careers"}},
        ]

        assert [c.name for c in map_categories(categories)] == [
            "Technology",
            "Software How-To",
            "Business",
            "Careers",
        ]

    def test_single_node_is_normalized(self) -> None:
        assert map_categories({"@_text": "Comedy"}) == (Category(name="Comedy"),)

    def test_absent_categories(self) -> None:
        assert map_categories(None) == ()

    def test_deeper_nesting_is_ignored(self) -> None:
        categories = {
            "@_text": "Society & Culture",
            "itunes:category": {
                "@_text": "Documentary",
                "itunes:category": {"@_text": "Too Deep"},
            },
        }

        assert [c.name for c in map_categories(categories)] == [
            "Society & Culture",
            "Documentary",
        ]

    @settings(max_examples=100)
    @given(
        tree=st.lists(
            st.tuples(label_strategy, st.lists(label_strategy, max_size=4)),
            max_size=5,
        )
    )
    def test_flattening_keeps_parent_then_children(
        self, tree: list[tuple[str, list[str]]]
    ) -> None:
        categories = [
            {"@_text": parent, "itunes:category": [{"@_text": child} for child in children]}
            for parent, children in tree
        ]

        names = [c.name for c in map_categories(categories)]

        expected = [name for parent, children in tree for name in (parent, *children)]
        assert names == expected


class TestMapEnclosure:
    """Tests for enclosure mapping."""

    def test_no_enclosure(self) -> None:
        assert map_enclosure(None) is None
        assert map_enclosure([]) is None

    def test_single_enclosure(self) -> None:
        enclosure = {
            "@_url": "https://example.com/ep1.mp3",
            "@_type": "audio/mpeg",
            "@_length": "123456",
        }

        assert map_enclosure(enclosure) == Enclosure(
            url="https://example.com/ep1.mp3", type="audio/mpeg", length="123456"
        )

    def test_only_first_enclosure_is_kept(self) -> None:
        enclosures = [
            {"@_url": "https://example.com/a.mp3", "@_type": "audio/mpeg", "@_length": "1"},
            {"@_url": "https://example.com/b.m4a", "@_type": "audio/x-m4a", "@_length": "2"},
        ]

        with pytest.warns(UserWarning, match="only the first is used"):
            result = map_enclosure(enclosures, guid="ep")

        assert result == Enclosure(url="https://example.com/a.mp3", type="audio/mpeg", length="1")

    def test_length_is_not_parsed(self) -> None:
        enclosure = {"@_url": "u", "@_type": "audio/mpeg", "@_length": "0012"}

        assert map_enclosure(enclosure).length == "0012"  # type: ignore[union-attr]

    @pytest.mark.parametrize("missing", ["url", "type", "length"])
    def test_missing_attribute_is_dropped_with_warning(self, missing: str) -> None:
        enclosure = {"@_url": "u", "@_type": "t", "@_length": "1"}
        del enclosure[f"@_{missing}"]

        with pytest.warns(UserWarning, match=missing):
            result = map_enclosure(enclosure, guid="ep")

        assert result is None

    @pytest.mark.parametrize(
        "enclosure", ["", ["", {"@_url": "u", "@_type": "t", "@_length": "1"}]]
    )
    def test_first_entry_without_attributes(self, enclosure: Any) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            assert map_enclosure(enclosure) is None


class TestMapEpisodes:
    """Tests for episode mapping."""

    def test_maps_all_fields(self, sample_item: dict[str, Any]) -> None:
        (episode,) = map_episodes([sample_item])

        assert episode == Episode(
            guid="ep1-guid",
            title="Episode 1",
            link_url="https://example.com/ep1",
            pub_date="Mon, 01 Jan 2024 12:00:00 GMT",
            description="First episode",
            duration_in_seconds="3600",
            image_url="https://example.com/ep1.jpg",
            explicit=True,
            number="1",
            season="1",
            type="full",
            enclosure=Enclosure(
                url="https://example.com/ep1.mp3", type="audio/mpeg", length="123456"
            ),
        )

    def test_values_pass_through_unchanged(self, sample_item: dict[str, Any]) -> None:
        sample_item["itunes:duration"] = "1:02:03"
        sample_item["itunes:episode"] = 7

        episode = map_episode(sample_item)

        assert episode.duration_in_seconds == "1:02:03"
        assert episode.number == 7

    def test_plain_guid(self, sample_item: dict[str, Any]) -> None:
        sample_item["guid"] = "plain-guid"

        assert map_episode(sample_item).guid == "plain-guid"

    def test_missing_guid_is_a_fault(self, sample_item: dict[str, Any]) -> None:
        del sample_item["guid"]

        with pytest.raises(ValueError, match="guid"):
            map_episode(sample_item)

    def test_minimal_item(self) -> None:
        episode = map_episode({"guid": {"#text": "g"}})

        assert episode == Episode(guid="g")
        assert episode.explicit is False
        assert episode.enclosure is None

    def test_document_order(self) -> None:
        items = [{"guid": "a"}, {"guid": "b"}, {"guid": "c"}]

        assert [e.guid for e in map_episodes(items)] == ["a", "b", "c"]

    def test_absent_items(self) -> None:
        assert map_episodes(None) == ()

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("yes", True), ("no", False), ("true", False), ("Yes", False), ("clean", False)],
    )
    def test_explicit_uses_yes_no(self, raw: str, expected: bool) -> None:
        episode = map_episode({"guid": "g", "itunes:explicit": raw})

        assert episode.explicit is expected

    def test_episode_is_immutable(self, sample_item: dict[str, Any]) -> None:
        episode = map_episode(sample_item)

        with pytest.raises(dataclasses.FrozenInstanceError):
            episode.title = "changed"  # type: ignore[misc]


class TestChannel:
    """Tests for channel extraction, validation and mapping."""

    def test_extract_channel(self) -> None:
        channel = {"title": "T", "link": "L"}

        assert extract_channel({"rss": {"channel": channel}}) is channel

    @pytest.mark.parametrize(
        "tree",
        [{}, {"rss": ""}, {"rss": {"@_version": "2.0"}}, {"feed": {"title": "Atom"}}],
    )
    def test_missing_channel(self, tree: dict[str, Any]) -> None:
        with pytest.raises(FeedFormatError, match="missing channel data"):
            extract_channel(tree)

    @pytest.mark.parametrize(
        ("channel", "field"),
        [
            ({"link": "https://example.com"}, "title"),
            ({"title": "", "link": "https://example.com"}, "title"),
            ({"title": "T"}, "link"),
        ],
    )
    def test_missing_required_field(self, channel: dict[str, Any], field: str) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            validate_channel(channel)

        assert exc_info.value.field == field
        assert f'missing required field "{field}"' in str(exc_info.value)

    def test_map_minimal_channel(self) -> None:
        podcast = map_channel({"title": "Minimal Podcast", "link": "https://example.com"})

        assert podcast.title == "Minimal Podcast"
        assert podcast.description is None
        assert podcast.image_url is None
        assert podcast.author is None
        assert podcast.copyright is None
        assert podcast.funding_url is None
        assert podcast.type is None
        assert podcast.explicit is False
        assert podcast.complete is False
        assert podcast.categories == ()
        assert podcast.episodes == ()

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("false", False), ("yes", False), ("True", False), ("", False)],
    )
    def test_explicit_uses_true_false(self, raw: str, expected: bool) -> None:
        podcast = map_channel({"title": "T", "link": "L", "itunes:explicit": raw})

        assert podcast.explicit is expected

    @settings(max_examples=100)
    @given(raw=st.text(max_size=10))
    def test_explicit_flags_only_match_exact_literals(self, raw: str) -> None:
        podcast = map_channel(
            {
                "title": "T",
                "link": "L",
                "itunes:explicit": raw,
                "item": {"guid": "g", "itunes:explicit": raw},
            }
        )

        assert podcast.explicit is (raw == "true")
        assert podcast.episodes[0].explicit is (raw == "yes")

    def test_complete_flag(self) -> None:
        podcast = map_channel({"title": "T", "link": "L", "itunes:complete": "Yes"})

        assert podcast.complete is True

    def test_optional_attributes(self) -> None:
        podcast = map_channel(
            {
                "title": "T",
                "link": "L",
                "itunes:image": {"@_href": "https://example.com/cover.jpg"},
                "podcast:funding": {"@_url": "https://example.com/donate", "#text": "Donate"},
            }
        )

        assert podcast.image_url == "https://example.com/cover.jpg"
        assert podcast.funding_url == "https://example.com/donate"
