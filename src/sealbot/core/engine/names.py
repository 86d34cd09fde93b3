"""Random display names for on-chain entries."""

from __future__ import annotations

import random

ADJECTIVES = [
    "Quick", "Lazy", "Sleepy", "Shiny", "Brave", "Clever", "Happy", "Silent",
    "Witty", "Gentle", "Ancient", "Mystic", "Golden", "Iron", "Cosmic",
]
NOUNS = [
    "Fox", "Dog", "Cat", "Tiger", "Lion", "Panda", "Robot", "Dragon",
    "Wizard", "Golem", "Sphinx", "Phoenix", "Star", "Moon", "Planet",
]
PROJECT_WORDS = [
    "Entry", "Item", "Project", "Service", "List", "Task", "Blob", "Data", "Asset", "Record",
]


def generate_name(kind: str = "entry", rng: random.Random | None = None) -> str:
    """
    Generate a name like ``Brave-Fox-List-1234``.

    Args:
        kind: ``allowlist``, ``service`` or anything else for a generic entry
        rng: Optional random source
    """
    rng = rng or random
    adjective = rng.choice(ADJECTIVES)
    number = rng.randrange(10000)

    if kind == "allowlist":
        base = f"{adjective}-{rng.choice(NOUNS)}-List"
    elif kind == "service":
        base = f"{adjective}-{rng.choice(PROJECT_WORDS)}-Service"
    else:
        base = f"{adjective}-{rng.choice(NOUNS)}-{rng.choice(PROJECT_WORDS)}"

    return f"{base}-{number}"
