from __future__ import annotations
from ..chunk import Chunk
from . import Backend
from .icons import merge_icons

#: Glyphs for the status codes of ``pijul diff --short``
STATUS_ICONS = {
    "MV": "→",  # moved
    "D": "−",  # deleted
    "UD": "⊖",  # undeleted
    "A": "✚",  # added
    "SC": "⚠",  # solving a conflict
    "UC": "!",  # unsolving a conflict
    "M": "●",  # edited
    "R": "◉",  # replaced
    "RZ": "↺",  # resurrecting zombie lines
}


def status_icon(line: str) -> str:
    code, _, _ = line.strip().partition(" ")
    return STATUS_ICONS.get(code, "")


class Pijul(Backend):
    async def pijul(self, *args: str) -> str | None:
        return await self.ctx.cmd.exec("pijul", *args)

    async def branch(self) -> Chunk | None:
        s = await self.pijul("channel")
        if s is None:
            return None
        # The current channel is marked with an asterisk
        for line in s.splitlines():
            if line.startswith("*"):
                return Chunk.new("⎇", line[1:].strip())
        return None

    async def commit(self) -> Chunk | None:
        # The first line is "Change <hash>"
        s = await self.pijul("log", "--limit", "1")
        if not s:
            return None
        tokens = s.splitlines()[0].split()
        if len(tokens) < 2:
            return None
        return Chunk.new("⭑", tokens[1])

    async def status(self) -> Chunk | None:
        if s := await self.pijul("diff", "--short"):
            if icons := merge_icons(map(status_icon, s.splitlines())):
                return Chunk.only_info(icons)
        return None
