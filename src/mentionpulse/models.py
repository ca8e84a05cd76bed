"""Domain models used across the pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from mentionpulse.sentiment import label as sentiment_label_for


class Platform(str, Enum):
    TWITTER = "twitter"
    REDDIT = "reddit"
    NEWS = "news"
    BLOG = "blog"
    FORUM = "forum"


# Display name for each platform
SOURCE_NAMES: dict[Platform, str] = {
    Platform.TWITTER: "Twitter",
    Platform.REDDIT: "Reddit",
    Platform.NEWS: "News",
    Platform.BLOG: "Blog",
    Platform.FORUM: "Forum",
}


class MentionPayload(BaseModel):
    """Candidate mention produced by a source, before scoring."""

    source: str
    platform: Platform
    text: str = ""
    timestamp: int | None = None  # ms since epoch; pipeline clock when missing


class Mention(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    source: str
    platform: Platform
    text: str
    timestamp: int
    sentiment_score: float = Field(ge=-1.0, le=1.0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def sentiment_label(self) -> str:
        return sentiment_label_for(self.sentiment_score)


class TopicCluster(BaseModel):
    id: str  # e.g. "topic_0"
    label: str = "misc"
    count: int = 0
    mention_ids: list[str] = Field(default_factory=list)


class SpikeAlert(BaseModel):
    message: str = "Spike detected in mentions"
    timestamp: int


class Analytics(BaseModel):
    total: int = 0
    by_sentiment: dict[str, int] = Field(default_factory=dict)
    last_updated: int = 0


class MentionsPage(BaseModel):
    total: int = 0
    mentions: list[Mention] = Field(default_factory=list)
    topics: list[TopicCluster] = Field(default_factory=list)


class InitSnapshot(BaseModel):
    """State handed to an observer when it first subscribes."""

    mentions: list[Mention] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    analytics: Analytics = Field(default_factory=Analytics)
