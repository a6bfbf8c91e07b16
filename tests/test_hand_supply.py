import random

from okeycam.hand_supply import MOCK_WARNING, MockHandSupplier, extract_hand_from_capture, generate_mock_hand
from okeycam.schemas import Tile, TileColor


def test_generate_mock_hand_shape():
    hand = generate_mock_hand(14, 0.1, random.Random(1))
    assert len(hand) == 14
    assert all(1 <= tile.value <= 13 for tile in hand)
    assert all(tile.color in set(TileColor) for tile in hand)


def test_generate_mock_hand_joker_probability_bounds():
    rng = random.Random(7)
    assert not any(tile.is_joker for tile in generate_mock_hand(50, 0.0, rng))
    assert all(tile.is_joker for tile in generate_mock_hand(50, 1.0, rng))


def test_seeded_supplier_is_reproducible():
    first = MockHandSupplier(hand_size=14, seed=42).produce_hand()
    second = MockHandSupplier(hand_size=14, seed=42).produce_hand()
    assert first == second


def test_extract_hand_from_capture_with_mock_supplier():
    payload = extract_hand_from_capture(b"fake", MockHandSupplier(hand_size=5, seed=3))
    assert payload["tiles_count"] == 5
    assert len(payload["tiles"]) == 5
    assert payload["warnings"] == [MOCK_WARNING]


class FixedSupplier:
    name = "fixed"
    version = "test"
    warnings = ("low light",)

    def produce_hand(self, image_bytes=None):
        return [Tile(color="red", value=1), Tile(color="red", value=2)]


def test_extract_hand_from_capture_accepts_other_suppliers():
    payload = extract_hand_from_capture(b"fake", FixedSupplier())
    assert payload["tiles_count"] == 2
    assert payload["warnings"] == ["low light"]
