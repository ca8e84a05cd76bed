"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]
KEYWORDS_FILE: Path = Path(
    os.getenv("MENTIONPULSE_KEYWORDS_FILE", str(PROJECT_ROOT / "config" / "keywords.yml"))
)

# ── Store / query limits ───────────────────────────────────────────────────
MAX_STORE: int = int(os.getenv("MENTIONPULSE_MAX_STORE", "5000"))
MAX_RETURNED: int = int(os.getenv("MENTIONPULSE_MAX_RETURNED", "500"))
CLUSTER_WINDOW: int = int(os.getenv("MENTIONPULSE_CLUSTER_WINDOW", "30"))

# ── Feed ───────────────────────────────────────────────────────────────────
SIMULATE_INTERVAL_MS: int = int(os.getenv("MENTIONPULSE_INTERVAL_MS", "2200"))
SEED_COUNT: int = int(os.getenv("MENTIONPULSE_SEED_COUNT", "40"))

# ── Spike detection ────────────────────────────────────────────────────────
SPIKE_WINDOW_MS: int = int(os.getenv("MENTIONPULSE_SPIKE_WINDOW_MS", str(60 * 1000)))
SPIKE_THRESHOLD_MULTIPLIER: float = float(os.getenv("MENTIONPULSE_SPIKE_MULTIPLIER", "3"))

# ── X API ──────────────────────────────────────────────────────────────────
X_BEARER_TOKEN: str = os.getenv("X_BEARER_TOKEN", "")
X_MAX_RESULTS: int = int(os.getenv("MENTIONPULSE_X_MAX_RESULTS", "50"))

DEFAULT_KEYWORDS: list[str] = ["rapidquest", "product", "launch", "issue", "update"]
