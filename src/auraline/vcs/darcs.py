from __future__ import annotations
from ..chunk import Chunk
from . import Backend
from .icons import merge_icons

#: Glyphs for the status codes of ``darcs whatsnew --summary``
STATUS_ICONS = {
    "R": "−",  # removed
    "A": "✚",  # added
    "M": "●",  # modified
    "F": "→",  # moved from
    "T": "→",  # moved to
}


def status_icon(line: str) -> str:
    code, _, _ = line.strip().partition(" ")
    return STATUS_ICONS.get(code, "")


class Darcs(Backend):
    async def darcs(self, *args: str) -> str | None:
        return await self.ctx.cmd.exec("darcs", *args)

    async def commit(self) -> Chunk | None:
        # The first line is "patch <hash>"
        s = await self.darcs("log", "--last", "1", "--summary")
        if not s:
            return None
        tokens = s.splitlines()[0].split()
        if len(tokens) < 2:
            return None
        return Chunk.new("⭑", tokens[1])

    async def status(self) -> Chunk | None:
        # `darcs whatsnew` exits nonzero when there are no changes
        if s := await self.darcs("whatsnew", "--summary"):
            if icons := merge_icons(map(status_icon, s.splitlines())):
                return Chunk.only_info(icons)
        return None
