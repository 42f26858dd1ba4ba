"""Tests de la paleta con nombre y de la fuente aleatoria del proceso."""

import os
import random

from PySide6.QtGui import QColor

from sgis.core import palette


def test_palette_excludes_black_white_and_grays():
    names = palette.palette_names()
    assert len(names) > 100
    assert "black" not in names and "white" not in names
    assert not any("gray" in n or "grey" in n for n in names)
    assert all(QColor(n).isValid() for n in names)
    assert list(names) == sorted(set(names))


def test_random_color_is_deterministic_with_seed():
    a = [palette.random_color(random.Random(7)).name() for _ in range(3)]
    b = [palette.random_color(random.Random(7)).name() for _ in range(3)]
    assert a == b


def test_default_rng_is_process_wide_and_seeded_from_env():
    os.environ["SGIS_RANDOM_SEED"] = "123"
    rng = palette.default_rng()
    assert palette.default_rng() is rng
    assert rng.random() == random.Random(123).random()


def test_reseed_replaces_rng():
    first = palette.reseed(5)
    assert palette.default_rng() is first
    assert first.random() == random.Random(5).random()
