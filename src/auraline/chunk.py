from __future__ import annotations
from dataclasses import dataclass, replace
from .styles import Painter
from .styles import StyleClass as SC


@dataclass(frozen=True)
class Chunk:
    """
    A single segment of the prompt: an optional icon followed by optional
    information text, each painted with its own style class
    """

    icon: str | None = None
    info: str | None = None
    icon_style: SC = SC.ICON
    info_style: SC = SC.PLAIN

    @classmethod
    def new(cls, icon: str, info: str) -> Chunk:
        return cls(icon=icon, info=info)

    @classmethod
    def only_icon(cls, icon: str) -> Chunk:
        return cls(icon=icon)

    @classmethod
    def only_info(cls, info: str) -> Chunk:
        return cls(info=info)

    def with_style(self, icon_style: SC, info_style: SC) -> Chunk:
        return replace(self, icon_style=icon_style, info_style=info_style)

    def display(self, paint: Painter) -> str:
        parts = []
        if self.icon is not None:
            parts.append(paint(self.icon, self.icon_style))
        if self.info is not None:
            parts.append(paint(self.info, self.info_style))
        return " ".join(parts)

    def __str__(self) -> str:
        return " ".join(p for p in (self.icon, self.info) if p is not None)
