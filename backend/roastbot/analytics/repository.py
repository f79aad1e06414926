"""Engagement analytics (reactions, shares, per-roast feedback).

State lives behind ``AnalyticsRepository`` and is injected into the routes.
``InMemoryAnalyticsRepository`` keeps counters in process memory (tests,
local dev). ``JsonlAnalyticsRepository`` additionally appends every event to
``events.jsonl`` and replays the log on start-up, so counts survive restarts.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

REACTIONS = ("love", "funny", "meh", "bad")
PLATFORMS = ("twitter", "facebook", "copy")
CONTENT_TYPES = ("roast", "compliment")


def _zero_reactions() -> dict[str, int]:
    return {r: 0 for r in REACTIONS}


@dataclass
class PromptUsage:
    uses: int = 0
    reactions: dict[str, int] = field(default_factory=_zero_reactions)


@dataclass
class ReactionStats:
    reactions: dict[str, int] = field(default_factory=_zero_reactions)
    prompts: dict[str, PromptUsage] = field(default_factory=dict)
    total: int = 0


@dataclass
class ShareStats:
    platforms: dict[str, dict[str, int]] = field(
        default_factory=lambda: {p: {t: 0 for t in CONTENT_TYPES} for p in PLATFORMS}
    )
    total: int = 0


@dataclass
class RoastFeedback:
    roast_id: str
    reaction: str | None = None  # like | dislike
    suggestion: str | None = None
    updated_at: float = 0.0


class AnalyticsRepository(ABC):
    @abstractmethod
    def record_reaction(
        self, content_id: str, content_type: str, reaction: str, prompt_used: str | None = None,
    ) -> ReactionStats: ...

    @abstractmethod
    def reaction_stats(self) -> ReactionStats: ...

    @abstractmethod
    def record_share(self, content_type: str, platform: str, meme_id: str | None = None) -> ShareStats: ...

    @abstractmethod
    def share_stats(self) -> ShareStats: ...

    @abstractmethod
    def submit_roast_feedback(
        self, roast_id: str, reaction: str | None = None, suggestion: str | None = None,
    ) -> RoastFeedback | None: ...

    @abstractmethod
    def get_roast_feedback(self, roast_id: str) -> list[RoastFeedback]: ...

    def roast_feedback_stats(self, roast_id: str) -> dict[str, int]:
        records = self.get_roast_feedback(roast_id)
        return {
            "likes": sum(1 for r in records if r.reaction == "like"),
            "dislikes": sum(1 for r in records if r.reaction == "dislike"),
        }


class InMemoryAnalyticsRepository(AnalyticsRepository):
    """Every mutation is an event dict applied under a single lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._reactions = ReactionStats()
        self._shares = ShareStats()
        self._roast_feedback: dict[str, RoastFeedback] = {}

    # ── Public API ──

    def record_reaction(
        self, content_id: str, content_type: str, reaction: str, prompt_used: str | None = None,
    ) -> ReactionStats:
        if reaction not in REACTIONS:
            raise ValueError(f"Unknown reaction {reaction!r}")
        self._commit({
            "kind": "reaction",
            "content_id": content_id,
            "content_type": content_type,
            "reaction": reaction,
            "prompt_used": prompt_used,
        })
        logger.info("Feedback received: %s %s → %s", content_type, content_id, reaction)
        return self.reaction_stats()

    def reaction_stats(self) -> ReactionStats:
        with self._lock:
            return ReactionStats(
                reactions=dict(self._reactions.reactions),
                prompts={
                    k: PromptUsage(uses=v.uses, reactions=dict(v.reactions))
                    for k, v in self._reactions.prompts.items()
                },
                total=self._reactions.total,
            )

    def record_share(self, content_type: str, platform: str, meme_id: str | None = None) -> ShareStats:
        if platform not in PLATFORMS:
            raise ValueError(f"Unknown platform {platform!r}")
        if content_type not in CONTENT_TYPES:
            raise ValueError(f"Unknown content type {content_type!r}")
        self._commit({
            "kind": "share",
            "content_type": content_type,
            "platform": platform,
            "meme_id": meme_id,
        })
        logger.info("Share tracked: %s on %s", content_type, platform)
        return self.share_stats()

    def share_stats(self) -> ShareStats:
        with self._lock:
            return ShareStats(
                platforms={p: dict(c) for p, c in self._shares.platforms.items()},
                total=self._shares.total,
            )

    def submit_roast_feedback(
        self, roast_id: str, reaction: str | None = None, suggestion: str | None = None,
    ) -> RoastFeedback | None:
        self._commit({
            "kind": "roast_feedback",
            "roast_id": roast_id,
            "reaction": reaction,
            "suggestion": suggestion,
            "timestamp": time.time(),
        })
        with self._lock:
            current = self._roast_feedback.get(roast_id)
            return RoastFeedback(**asdict(current)) if current else None

    def get_roast_feedback(self, roast_id: str) -> list[RoastFeedback]:
        with self._lock:
            current = self._roast_feedback.get(roast_id)
            return [RoastFeedback(**asdict(current))] if current else []

    # ── Event application ──

    def _commit(self, event: dict[str, Any]) -> None:
        with self._lock:
            self._apply(event)

    def _apply(self, event: dict[str, Any]) -> None:
        kind = event.get("kind")
        if kind == "reaction":
            reaction = event["reaction"]
            self._reactions.reactions[reaction] += 1
            self._reactions.total += 1
            prompt = event.get("prompt_used")
            if prompt:
                usage = self._reactions.prompts.setdefault(prompt, PromptUsage())
                usage.uses += 1
                usage.reactions[reaction] += 1
        elif kind == "share":
            self._shares.platforms[event["platform"]][event["content_type"]] += 1
            self._shares.total += 1
        elif kind == "roast_feedback":
            self._apply_roast_feedback(event)
        else:
            logger.warning("Ignoring unknown analytics event %r", kind)

    def _apply_roast_feedback(self, event: dict[str, Any]) -> None:
        roast_id = event["roast_id"]
        reaction = event.get("reaction")
        suggestion = event.get("suggestion")
        existing = self._roast_feedback.get(roast_id)

        if existing is not None:
            if not reaction and not suggestion:
                del self._roast_feedback[roast_id]
                return
            existing.reaction = reaction or existing.reaction
            existing.suggestion = suggestion or None
            existing.updated_at = event.get("timestamp", 0.0)
        elif reaction or suggestion:
            self._roast_feedback[roast_id] = RoastFeedback(
                roast_id=roast_id,
                reaction=reaction,
                suggestion=suggestion,
                updated_at=event.get("timestamp", 0.0),
            )


class JsonlAnalyticsRepository(InMemoryAnalyticsRepository):
    """Append-only JSONL event log, replayed into memory on construction."""

    def __init__(self, data_dir: Path) -> None:
        super().__init__()
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.events_file = self.data_dir / "events.jsonl"
        self._replay()

    def _commit(self, event: dict[str, Any]) -> None:
        with self._lock:
            with open(self.events_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._apply(event)

    def _replay(self) -> None:
        if not self.events_file.exists():
            return
        count = 0
        with open(self.events_file, encoding="utf-8") as f:
            for line_no, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    event = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning("Skipping malformed analytics event at line %d", line_no)
                    continue
                self._apply(event)
                count += 1
        logger.info("Replayed %d analytics events from %s", count, self.events_file)


def create_repository(backend: str, data_dir: Path) -> AnalyticsRepository:
    if backend == "jsonl":
        return JsonlAnalyticsRepository(data_dir)
    if backend != "memory":
        logger.warning("Unknown analytics backend %r, using in-memory store", backend)
    return InMemoryAnalyticsRepository()
