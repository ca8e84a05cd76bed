"""Group recent mentions into topic clusters by term-vector similarity."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from mentionpulse.models import Mention, TopicCluster
from mentionpulse.sentiment import tokenize
from mentionpulse.vectorize import cosine_similarity, vectorize

logger = logging.getLogger(__name__)

# A mention joins a cluster when its mean similarity to the members exceeds this
SIMILARITY_THRESHOLD = 0.32

# Number of top terms used for a cluster label
_LABEL_TERMS = 4


@dataclass
class _Accumulator:
    mention_ids: list[str] = field(default_factory=list)
    vectors: list[dict[str, int]] = field(default_factory=list)
    combined: dict[str, int] = field(default_factory=dict)

    def mean_similarity(self, vec: dict[str, int]) -> float:
        return sum(cosine_similarity(vec, member) for member in self.vectors) / len(self.vectors)

    def add(self, mention_id: str, vec: dict[str, int]) -> None:
        self.mention_ids.append(mention_id)
        self.vectors.append(vec)
        for term, count in vec.items():
            self.combined[term] = self.combined.get(term, 0) + count

    def label(self) -> str:
        # sorted() is stable, so equal weights keep first-seen order
        ranked = sorted(self.combined.items(), key=lambda kv: kv[1], reverse=True)
        top = [term for term, _ in ranked[:_LABEL_TERMS] if term]
        return ", ".join(top) or "misc"


def cluster_mentions(
    mentions: Sequence[Mention],
    threshold: float = SIMILARITY_THRESHOLD,
) -> list[TopicCluster]:
    """Greedy first-fit clustering over *mentions* in input order.

    Each mention is compared against every existing cluster using the mean
    cosine similarity to that cluster's current members. It joins the first
    cluster whose mean exceeds *threshold*; otherwise it starts a new one.
    Input order changes the outcome.
    """
    accumulators: list[_Accumulator] = []

    for mention in mentions:
        vec = vectorize(tokenize(mention.text))
        for acc in accumulators:
            if acc.mean_similarity(vec) > threshold:
                acc.add(mention.id, vec)
                break
        else:
            acc = _Accumulator()
            acc.add(mention.id, vec)
            accumulators.append(acc)

    clusters = [
        TopicCluster(
            id=f"topic_{idx}",
            label=acc.label(),
            count=len(acc.mention_ids),
            mention_ids=acc.mention_ids,
        )
        for idx, acc in enumerate(accumulators)
    ]
    logger.info("Clustered %d mentions into %d topics", len(mentions), len(clusters))
    return clusters
