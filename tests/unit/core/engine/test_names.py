"""Tests for random entry names."""

from __future__ import annotations

import random
import re

from sealbot.core.engine.names import ADJECTIVES, NOUNS, PROJECT_WORDS, generate_name


def test_allowlist_name():
    name = generate_name("allowlist", random.Random(1))
    adjective, noun, suffix, number = name.split("-")
    assert adjective in ADJECTIVES
    assert noun in NOUNS
    assert suffix == "List"
    assert 0 <= int(number) < 10000


def test_service_name():
    adjective, word, suffix, _ = generate_name("service", random.Random(2)).split("-")
    assert adjective in ADJECTIVES
    assert word in PROJECT_WORDS
    assert suffix == "Service"


def test_generic_name():
    assert re.fullmatch(r"[A-Za-z]+-[A-Za-z]+-[A-Za-z]+-\d{1,4}", generate_name())


def test_seeded_rng_is_reproducible():
    assert generate_name("allowlist", random.Random(5)) == generate_name("allowlist", random.Random(5))
