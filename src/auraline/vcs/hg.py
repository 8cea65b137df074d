from __future__ import annotations
from pathlib import Path
from ..chunk import Chunk
from ..util import cat
from . import Backend
from .icons import merge_icons

#: Glyphs for the status codes of ``hg status``
STATUS_ICONS = {
    "A": "✚",  # added
    "M": "●",  # modified
    "R": "✖",  # removed
    "!": "!",  # missing
    "?": "?",  # not tracked
    "C": "",  # clean
    "I": "",  # ignored
}

#: Length in bytes of a changeset ID in ``.hg/dirstate``
NODE_ID_LEN = 20

#: Header that starts ``.hg/dirstate`` in repositories using the
#: ``dirstate-v2`` format; the parent IDs follow it
DIRSTATE_V2_MARKER = b"dirstate-v2\n"


def status_icon(line: str) -> str:
    return STATUS_ICONS.get(line[:1], "")


class Hg(Backend):
    """
    Mercurial.  Stashes (shelves) and divergence from upstream are not
    reported.
    """

    @property
    def hgdir(self) -> Path:
        return self.root / ".hg"

    async def hg(self, *args: str) -> str | None:
        return await self.ctx.cmd.exec("hg", *args)

    async def branch(self) -> Chunk | None:
        # .hg/branch is absent until a branch other than the default is
        # created
        name = cat(self.hgdir / "branch") or "default"
        return Chunk.new("⎇", name)

    async def commit(self) -> Chunk | None:
        if self.ctx.options.fast:
            if (node := self.dirstate_parent()) is not None:
                return Chunk.only_info(node[:12])
            return None
        if ident := await self.hg("id"):
            return Chunk.only_info(ident)
        return None

    def dirstate_parent(self) -> str | None:
        """
        Read the ID of the working directory's first parent directly from
        ``.hg/dirstate``, where it comes first (after the format marker, in
        ``dirstate-v2`` repositories).  Returns `None` if the file cannot be
        read or if the parent is the null revision.
        """
        try:
            with (self.hgdir / "dirstate").open("rb") as fp:
                head = fp.read(len(DIRSTATE_V2_MARKER) + NODE_ID_LEN)
        except OSError:
            return None
        if head.startswith(DIRSTATE_V2_MARKER):
            head = head[len(DIRSTATE_V2_MARKER) :]
        node = head[:NODE_ID_LEN]
        if len(node) < NODE_ID_LEN or not any(node):
            return None
        return node.hex()

    async def status(self) -> Chunk | None:
        if s := await self.hg("status"):
            if icons := merge_icons(map(status_icon, s.splitlines())):
                return Chunk.only_info(icons)
        return None

    async def worktree(self) -> Chunk | None:
        # A shared working copy records the .hg directory of the repository
        # that it shares history with.
        sharedpath = cat(self.hgdir / "sharedpath")
        if not sharedpath:
            return None
        source, sep, _ = sharedpath.rstrip("/").rpartition("/")
        if not sep:
            return None
        return Chunk.new("⌂", source or "/")
