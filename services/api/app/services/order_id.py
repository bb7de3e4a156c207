from __future__ import annotations

import random
import re
import string

ORDER_ID_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{4}$")

_system_random = random.SystemRandom()


def generate_order_id(rng: random.Random | None = None) -> str:
    """Two uppercase letters followed by a number in [1000, 9999], e.g. ``QX4821``.

    Not unique on its own; the order store's unique constraint catches collisions.
    """

    rng = rng or _system_random
    letters = "".join(rng.choice(string.ascii_uppercase) for _ in range(2))
    return f"{letters}{rng.randint(1000, 9999)}"
