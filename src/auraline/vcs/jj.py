from __future__ import annotations
from ..chunk import Chunk
from . import Backend
from .icons import merge_icons

#: Glyphs for the status codes of ``jj diff --summary``
STATUS_ICONS = {
    "M": "●",  # modified
    "A": "✚",  # added
    "D": "−",  # deleted
    "R": "→",  # renamed
    "C": "⊂",  # copied
}


def status_icon(line: str) -> str:
    return STATUS_ICONS.get(line[:1], "")


class Jj(Backend):
    """
    Jujutsu.  There is no current branch as such, and the working copy is
    always a commit, so only `commit` and `status` are reported.
    """

    async def jj(self, *args: str) -> str | None:
        return await self.ctx.cmd.exec("jj", *args)

    async def commit(self) -> Chunk | None:
        s = await self.jj("status", "--color", "never")
        if s is None:
            return None
        # Looks like "Working copy  (@) : kkmpptxz 3d9e2c1a (empty) ..."
        for line in s.splitlines():
            if line.startswith("Working copy") and "(@)" in line:
                tokens = line.split()
                if len(tokens) >= 6:
                    change_id, commit_id = tokens[4], tokens[5]
                    return Chunk.new("⭑", f"{change_id} {commit_id}")
                return None
        return None

    async def status(self) -> Chunk | None:
        if s := await self.jj("diff", "--summary", "--color", "never"):
            if icons := merge_icons(map(status_icon, s.splitlines())):
                return Chunk.only_info(icons)
        return None
