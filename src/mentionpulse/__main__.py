"""CLI entry-point: ``python -m mentionpulse simulate`` / ``python -m mentionpulse score``."""

from __future__ import annotations

import argparse
import logging
import sys

from mentionpulse import config
from mentionpulse.broadcast import LoggingChannel
from mentionpulse.keywords import load_keywords
from mentionpulse.pipeline import FeedRunner, MentionPipeline
from mentionpulse.sentiment import label, score
from mentionpulse.sources import MentionSource, SimulatedSource, XSearchSource

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_source(feed: str) -> MentionSource:
    if feed == "x":
        return XSearchSource(bearer_token=config.X_BEARER_TOKEN, max_results=config.X_MAX_RESULTS)
    return SimulatedSource()


def _simulate(ticks: int | None, interval_ms: int, feed: str, seed: bool) -> None:
    """Run the feed against a logging channel and report analytics at the end."""
    _setup_logging()

    try:
        keywords = load_keywords(config.KEYWORDS_FILE)
        source = _build_source(feed)
    except ValueError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    pipeline = MentionPipeline(LoggingChannel(), keywords=keywords)
    logger.info("=== mentionpulse start [feed=%s, keywords=%s] ===", feed, ", ".join(keywords))

    if seed:
        pipeline.seed(SimulatedSource())

    runner = FeedRunner(pipeline, source, interval_ms=interval_ms)
    try:
        runner.run(max_ticks=ticks)
    except KeyboardInterrupt:
        logger.info("Interrupted.")

    stats = pipeline.analytics()
    logger.info("Total mentions: %d", stats.total)
    for sentiment, count in sorted(stats.by_sentiment.items()):
        logger.info("  %-8s %d", sentiment, count)

    page = pipeline.fetch_mentions()
    for topic in page.topics:
        logger.info("  [%s] %s (%d)", topic.id, topic.label, topic.count)
    logger.info("=== mentionpulse done ===")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="mentionpulse",
        description="Real-time mention sentiment, topics and spike alerts.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── simulate ──────────────────────────────────────────────────────
    sim_parser = sub.add_parser("simulate", help="Run the mention feed.")
    sim_parser.add_argument(
        "--ticks",
        type=int,
        default=None,
        help="Stop after this many feed ticks (default: run until interrupted).",
    )
    sim_parser.add_argument(
        "--interval-ms",
        type=int,
        default=config.SIMULATE_INTERVAL_MS,
        help=f"Delay between ticks (default: {config.SIMULATE_INTERVAL_MS}).",
    )
    sim_parser.add_argument(
        "--feed",
        choices=["simulated", "x"],
        default="simulated",
        help="Where mentions come from (default: simulated).",
    )
    sim_parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Skip back-filling the store with simulated history.",
    )

    # ── score ─────────────────────────────────────────────────────────
    score_parser = sub.add_parser("score", help="Score a single piece of text.")
    score_parser.add_argument("text", help="Text to score.")

    args = parser.parse_args(argv)

    if args.command == "simulate":
        _simulate(
            ticks=args.ticks,
            interval_ms=args.interval_ms,
            feed=args.feed,
            seed=not args.no_seed,
        )
    elif args.command == "score":
        value = score(args.text)
        print(f"{value:+.3f} {label(value)}")
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
