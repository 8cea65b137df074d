from __future__ import annotations
from collections.abc import Iterable
from itertools import groupby
from ..util import to_superscript


def merge_icons(icons: Iterable[str]) -> str:
    """
    Collapse a collection of status glyphs into a compact summary.  Empty
    glyphs are dropped, the rest are sorted and grouped, and each group is
    rendered with `render_icon()`.  Sorting first makes the result independent
    of the order in which the glyphs were given.

    >>> merge_icons(["●", "⁇", "●", ""])
    '⁇●²'
    """
    return "".join(
        render_icon(glyph, sum(1 for _ in group))
        for glyph, group in groupby(sorted(i for i in icons if i))
    )


def render_icon(glyph: str, n: int) -> str:
    """
    Render ``glyph`` followed by ``n`` in superscript digits, or just the bare
    glyph if ``n`` is 1
    """
    if n == 1:
        return glyph
    else:
        return glyph + to_superscript(str(n))
