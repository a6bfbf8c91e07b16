from __future__ import annotations

import logging
import random
from typing import Any, Protocol

from okeycam.config import settings
from okeycam.schemas import COLOR_ORDER, Tile

logger = logging.getLogger(__name__)

MOCK_WARNING = "Tile recognition is not available; a random mock hand is used."


class HandSupplier(Protocol):
    name: str
    version: str
    warnings: tuple[str, ...]

    def produce_hand(self, image_bytes: bytes | None = None) -> list[Tile]:
        ...


def generate_mock_hand(
    size: int = 14,
    joker_probability: float = 0.1,
    rng: random.Random | None = None,
) -> list[Tile]:
    rng = rng or random.Random()
    return [
        Tile(
            color=rng.choice(COLOR_ORDER),
            value=rng.randint(1, 13),
            is_joker=rng.random() < joker_probability,
        )
        for _ in range(size)
    ]


class MockHandSupplier:
    """Stands in for a real recognizer: ignores the image and deals random tiles."""

    name = "mock-random"
    version = "1"
    warnings = (MOCK_WARNING,)

    def __init__(
        self,
        hand_size: int | None = None,
        joker_probability: float | None = None,
        seed: int | None = None,
    ) -> None:
        self.hand_size = settings.hand_size if hand_size is None else hand_size
        self.joker_probability = settings.joker_probability if joker_probability is None else joker_probability
        self._rng = random.Random(settings.mock_seed if seed is None else seed)

    def produce_hand(self, image_bytes: bytes | None = None) -> list[Tile]:
        return generate_mock_hand(self.hand_size, self.joker_probability, self._rng)


def extract_hand_from_capture(image_bytes: bytes, supplier: HandSupplier) -> dict[str, Any]:
    """Image -> hand estimate. This module must not score."""
    tiles = supplier.produce_hand(image_bytes)
    warnings = list(supplier.warnings)
    logger.info("supplier %s produced %d tiles", supplier.name, len(tiles))
    return {"tiles_count": len(tiles), "tiles": tiles, "warnings": warnings}
