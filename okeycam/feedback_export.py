from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from okeycam.config import settings


class FeedbackExporter:
    """Packs a scored hand and the player's correction into a JSON download."""

    def __init__(self, prefix: str | None = None) -> None:
        self.prefix = (prefix or settings.feedback_prefix).strip("/- ")

    def build(self, payload: dict) -> tuple[str, dict]:
        now = datetime.now(timezone.utc)
        filename = f"{self.prefix}-{now.strftime('%Y%m%d-%H%M%S')}-{uuid4().hex[:8]}.json"
        original = payload["score_response"]["result"]["score"]
        corrected = payload.get("corrected_score")
        document = {
            "saved_at": now.isoformat(),
            "original_score": original,
            "corrected_score": corrected,
            "difference": None if corrected is None else corrected - original,
            "payload": payload,
        }
        return filename, document
