"""Pytest fixtures for podkit tests."""

from typing import Any

import pytest


@pytest.fixture
def sample_feed_xml() -> str:
    """A complete podcast feed with one episode."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd" xmlns:podcast="https://podcastindex.org/namespace/1.0">
  <channel>
    <title>Test Podcast</title>
    <description>A test podcast</description>
    <link>https://example.com</link>
    <language>en</language>
    <itunes:category text="Technology">
      <itunes:category text="Software How-To"/>
    </itunes:category>
    <itunes:explicit>false</itunes:explicit>
    <itunes:image href="https://example.com/image.jpg"/>
    <itunes:author>John Doe</itunes:author>
    <copyright>2024 Test Podcast</copyright>
    <podcast:funding url="https://example.com/support">Support Us</podcast:funding>
    <itunes:type>episodic</itunes:type>
    <item>
      <title>Episode 1</title>
      <guid isPermaLink="false">episode-1-guid</guid>
      <link>https://example.com/episode1</link>
      <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
      <description>First episode</description>
      <itunes:duration>3600</itunes:duration>
      <itunes:image href="https://example.com/ep1.jpg"/>
      <itunes:explicit>no</itunes:explicit>
      <itunes:episode>1</itunes:episode>
      <itunes:season>1</itunes:season>
      <itunes:episodeType>full</itunes:episodeType>
      <enclosure url="https://example.com/ep1.mp3" type="audio/mpeg" length="123456"/>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def minimal_feed_xml() -> str:
    """A feed with only the mandatory channel fields."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Minimal Podcast</title>
    <link>https://example.com</link>
  </channel>
</rss>"""


@pytest.fixture
def sample_item() -> dict[str, Any]:
    """A parsed item node as produced by the XML tree builder."""
    return {
        "title": "Episode 1",
        "guid": {"@_isPermaLink": "false", "#text": "ep1-guid"},
        "link": "https://example.com/ep1",
        "pubDate": "Mon, 01 Jan 2024 12:00:00 GMT",
        "description": "First episode",
        "itunes:duration": "3600",
        "itunes:image": {"@_href": "https://example.com/ep1.jpg"},
        "itunes:explicit": "yes",
        "itunes:episode": "1",
        "itunes:season": "1",
        "itunes:episodeType": "full",
        "enclosure": {
            "@_url": "https://example.com/ep1.mp3",
            "@_type": "audio/mpeg",
            "@_length": "123456",
        },
    }


@pytest.fixture
def sample_search_response() -> dict[str, Any]:
    """A sample iTunes API response."""
    return {
        "resultCount": 2,
        "results": [
            {
                "wrapperType": "track",
                "kind": "podcast",
                "collectionId": 1200361736,
                "collectionName": "Test Podcast",
                "feedUrl": "https://example.com/feed.xml",
                "artistName": "Test Author",
                "artworkUrl600": "https://example.com/artwork.jpg",
            },
            {
                "wrapperType": "track",
                "kind": "podcast",
                "collectionName": "Another Podcast",
                "feedUrl": "https://example.com/feed2.xml",
            },
        ],
    }
