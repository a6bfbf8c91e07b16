from __future__ import annotations

from collections.abc import Sequence

from okeycam.schemas import COLOR_ORDER, ScoringResult, Tile, TileColor

MIN_VALUE = 1
MAX_VALUE = 13
GROUP_MIN_SIZE = 3
GROUP_BONUS = 10
RUN_MIN_LENGTH = 3
RUN_BONUS = 15


def _color_key(tile: Tile) -> TileColor | None:
    try:
        return TileColor(tile.color)
    except ValueError:
        return None


def _color_label(tile: Tile) -> str:
    if tile.color is None:
        return "renksiz"
    if isinstance(tile.color, TileColor):
        return tile.color.value
    return str(tile.color)


def _has_valid_value(tile: Tile) -> bool:
    return MIN_VALUE <= tile.value <= MAX_VALUE


def base_points(tiles: Sequence[Tile]) -> tuple[int, list[str]]:
    points = 0
    lines: list[str] = []
    for tile in tiles:
        if tile.is_joker:
            lines.append("Joker: 0 puan")
            continue
        points += tile.value
        lines.append(f"{_color_label(tile)} {tile.value}: {tile.value} puan")
    return points, lines


def find_groups(tiles: Sequence[Tile]) -> list[list[Tile]]:
    """Same-value buckets of at least three tiles, color ignored, in ascending value order."""
    buckets: dict[int, list[Tile]] = {}
    for tile in tiles:
        if tile.is_joker or not _has_valid_value(tile):
            continue
        buckets.setdefault(tile.value, []).append(tile)
    return [buckets[value] for value in sorted(buckets) if len(buckets[value]) >= GROUP_MIN_SIZE]


def find_runs(tiles: Sequence[Tile]) -> list[list[Tile]]:
    """Consecutive-value sequences of at least three tiles within one color.

    Colors are scanned in the fixed red, blue, black, yellow order. A repeated
    value closes the current run and starts a new one; it never extends it.
    """
    by_color: dict[TileColor, list[Tile]] = {color: [] for color in COLOR_ORDER}
    for tile in tiles:
        if tile.is_joker or not _has_valid_value(tile):
            continue
        color = _color_key(tile)
        if color is not None:
            by_color[color].append(tile)

    runs: list[list[Tile]] = []
    for color in COLOR_ORDER:
        current: list[Tile] = []
        for tile in sorted(by_color[color], key=lambda t: t.value):
            if not current or tile.value == current[-1].value + 1:
                current.append(tile)
                continue
            if len(current) >= RUN_MIN_LENGTH:
                runs.append(current)
            current = [tile]
        if len(current) >= RUN_MIN_LENGTH:
            runs.append(current)
    return runs


def score(tiles: Sequence[Tile]) -> ScoringResult:
    """Score an Okey 101 hand: face values plus +10 per group and +15 per run.

    Groups and runs are detected independently, so a tile may earn both
    bonuses. Never raises; malformed tiles only lose bonus eligibility.
    """
    total, breakdown = base_points(tiles)

    for _ in find_groups(tiles):
        total += GROUP_BONUS
        breakdown.append(f"Grup bonusu: +{GROUP_BONUS} puan")

    for _ in find_runs(tiles):
        total += RUN_BONUS
        breakdown.append(f"Düz bonusu: +{RUN_BONUS} puan")

    return ScoringResult(score=total, breakdown=breakdown, total_tiles=len(tiles))
