"""Value records produced by the parser.

All records are immutable pydantic models. Every declared field is always
present and defaults to the empty string, so a feed that omits an element
still produces a complete record. Serializing with ``by_alias=True`` yields
the camelCase keys used by other podcast tooling (``itunesAuthor``,
``contentEncoded``, ``feedUrl``, ...).
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_RECORD_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class PodcastImage(BaseModel):
    """The channel ``<image>`` element."""

    model_config = _RECORD_CONFIG

    url: str = ""
    title: str = ""
    link: str = ""


class ItunesOwner(BaseModel):
    """The channel ``<itunes:owner>`` element."""

    model_config = _RECORD_CONFIG

    name: str = ""
    email: str = ""


class Enclosure(BaseModel):
    """Media attachment of an episode (``<enclosure url=... type=...>``)."""

    model_config = _RECORD_CONFIG

    url: str = ""
    type: str = ""


class Podcast(BaseModel):
    """Show-level metadata of a feed.

    Attributes:
        title: Channel title.
        link: Channel website link.
        language: Channel language code as written in the feed.
        copyright: Copyright notice.
        description: Channel description (HTML is kept as-is).
        content_encoded: ``<content:encoded>`` rich content.
        feed_url: URL the feed was fetched from, or its ``atom:link rel="self"``.
        image: Channel image.
        itunes_author: ``<itunes:author>``.
        itunes_category: ``text`` attribute of the outermost ``<itunes:category>``.
        itunes_explicit: ``<itunes:explicit>`` verbatim.
        itunes_image: ``href`` attribute of ``<itunes:image>``.
        itunes_owner: Channel owner.
        itunes_subtitle: ``<itunes:subtitle>``.
        itunes_summary: ``<itunes:summary>``.
        itunes_type: ``<itunes:type>`` (``episodic`` or ``serial``).
    """

    model_config = _RECORD_CONFIG

    title: str = ""
    link: str = ""
    language: str = ""
    copyright: str = ""
    description: str = ""
    content_encoded: str = ""
    feed_url: str = ""
    image: PodcastImage = Field(default_factory=PodcastImage)
    itunes_author: str = ""
    itunes_category: str = ""
    itunes_explicit: str = ""
    itunes_image: str = ""
    itunes_owner: ItunesOwner = Field(default_factory=ItunesOwner)
    itunes_subtitle: str = ""
    itunes_summary: str = ""
    itunes_type: str = ""


class Episode(BaseModel):
    """One ``<item>`` of a feed.

    ``pub_date`` is the original string; it is not parsed into a datetime
    because feeds disagree on date formats.
    """

    model_config = _RECORD_CONFIG

    author: str = ""
    content_encoded: str = ""
    description: str = ""
    enclosure: Enclosure = Field(default_factory=Enclosure)
    guid: str = ""
    itunes_author: str = ""
    itunes_duration: str = ""
    itunes_episode: str = ""
    itunes_episode_type: str = ""
    itunes_explicit: str = ""
    itunes_subtitle: str = ""
    itunes_summary: str = ""
    itunes_title: str = ""
    link: str = ""
    pub_date: str = ""
    title: str = ""


class ParseResult(BaseModel):
    """Podcast plus its episodes in document order."""

    model_config = ConfigDict(frozen=True)

    podcast: Podcast
    episodes: List[Episode] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return ``{"podcast": ..., "episodes": [...]}`` with camelCase keys."""
        return {
            "podcast": self.podcast.model_dump(by_alias=True),
            "episodes": [episode.model_dump(by_alias=True) for episode in self.episodes],
        }
