import random

from services.api.app.services.order_id import ORDER_ID_PATTERN, generate_order_id


def test_order_id_matches_pattern() -> None:
    for _ in range(500):
        assert ORDER_ID_PATTERN.match(generate_order_id())


def test_order_id_is_reproducible_with_seeded_rng() -> None:
    assert generate_order_id(random.Random(7)) == generate_order_id(random.Random(7))


def test_order_id_number_stays_in_range() -> None:
    rng = random.Random(1)
    numbers = {int(generate_order_id(rng)[2:]) for _ in range(2000)}
    assert min(numbers) >= 1000
    assert max(numbers) <= 9999
