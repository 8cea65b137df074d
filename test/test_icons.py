from __future__ import annotations
from itertools import permutations
import random
import pytest
from auraline.vcs import git, hg, pijul
from auraline.vcs.icons import merge_icons, render_icon


@pytest.mark.parametrize(
    "icons,merged",
    [
        ([], ""),
        ([""], ""),
        (["a"], "a"),
        (["a", "a", "a"], "a³"),
        (["b", "a", "b", "", "a", "b"], "a²b³"),
        (["⁇"] * 12, "⁇¹²"),
        (["●", "⁇", "●", ""], "⁇●²"),
    ],
)
def test_merge_icons(icons: list[str], merged: str) -> None:
    assert merge_icons(icons) == merged


def test_merge_icons_order_independent() -> None:
    icons = ["●", "✚", "●", "⁇", "", "✚", "●"]
    expected = merge_icons(icons)
    assert all(merge_icons(p) == expected for p in permutations(icons))


def test_merge_icons_accepts_iterators() -> None:
    assert merge_icons(iter(["x", "y", "x"])) == "x²y"


@pytest.mark.parametrize("seed", range(5))
def test_merge_icons_random_shuffle(seed: int) -> None:
    rng = random.Random(seed)
    icons = [rng.choice(["●", "○", "✚", "−", ""]) for _ in range(40)]
    shuffled = icons[:]
    rng.shuffle(shuffled)
    assert merge_icons(shuffled) == merge_icons(icons)


@pytest.mark.parametrize(
    "glyph,n,rendered",
    [
        ("≡", 1, "≡"),
        ("≡", 2, "≡²"),
        ("≡", 10, "≡¹⁰"),
        ("✚", 305, "✚³⁰⁵"),
    ],
)
def test_render_icon(glyph: str, n: int, rendered: str) -> None:
    assert render_icon(glyph, n) == rendered


@pytest.mark.parametrize(
    "line,icon",
    [
        ("?? new.txt", "⁇"),
        (" M src/main.py", "○"),
        ("M  src/main.py", "●"),
        ("MM src/main.py", "◉"),
        ("UU conflict.txt", "⚠"),
        ("R  old -> new", "→"),
        ("!! build/", ""),
        ("", ""),
        ("X", ""),
    ],
)
def test_git_status_icon(line: str, icon: str) -> None:
    assert git.status_icon(line) == icon


def test_hg_status_icon() -> None:
    lines = ["M a.txt", "A b.txt", "? c.txt", "M d.txt", "C e.txt"]
    assert merge_icons(map(hg.status_icon, lines)) == "?●²✚"


def test_pijul_status_icon() -> None:
    assert pijul.status_icon("MV a -> b") == "→"
    assert pijul.status_icon("  M file.rs") == "●"
    assert pijul.status_icon("garbage") == ""
