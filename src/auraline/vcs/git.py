from __future__ import annotations
import asyncio
from pathlib import Path
import re
from ..chunk import Chunk
from . import Backend
from .icons import merge_icons, render_icon

#: Glyphs for the two-character status codes of ``git status --porcelain``
STATUS_ICONS = {
    # Unmerged
    "DD": "✖",
    "AA": "⧉",
    "UU": "⚠",
    "AU": "⊕",
    "UA": "⊞",
    "DU": "⊖",
    "UD": "⊟",
    # Changed in the index
    "M ": "●",
    "MM": "◉",
    "MD": "◐",
    "MT": "◑",
    "A ": "✚",
    "AM": "✛",
    "AD": "⊕",
    "AT": "⊛",
    "D ": "−",
    "DM": "∓",
    "R ": "→",
    "RM": "⇢",
    "RD": "⇥",
    "RT": "⤳",
    "C ": "⊂",
    "CM": "⊃",
    "CD": "⊄",
    "CT": "⊅",
    "T ": "◈",
    "TM": "◊",
    "TD": "⬧",
    "TT": "⬢",
    # Changed in the worktree only
    " M": "○",
    " D": "⨯",
    " T": "◇",
    " R": "↻",
    " C": "⊆",
    " A": "⊹",
    "??": "⁇",
    "!!": "",
}

#: Rewrites applied, in order, to the output of ``git name-rev``
NAME_REV_REWRITES = [
    ("remotes/origin/", "ᐲ•"),
    ("remotes/", "⟢•"),
    ("tags/", ""),
    ("~", "↓"),
]

BRANCH_ICON_DETACHED = "⚠"
BRANCH_ICON_DEFAULT = "⟝"
BRANCH_ICON_OTHER = "⎇"


def status_icon(line: str) -> str:
    """
    Return the glyph for a line of ``git status --porcelain`` output, or the
    empty string if the status code is not recognized
    """
    return STATUS_ICONS.get(line[:2], "")


def format_describe(s: str) -> str:
    """
    Shorten the output of ``git describe --long --always``: ``TAG-N-gHASH``
    becomes ``TAG▴N|HASH`` (or ``TAG|HASH`` if ``N`` is zero); anything else
    (e.g., a bare hash) is returned unchanged.
    """
    m = re.fullmatch(r"(?P<tag>.+)-(?P<n>\d+)-g(?P<hash>[0-9a-f]+)", s)
    if m is None:
        return s
    elif m["n"] == "0":
        return f"{m['tag']}|{m['hash']}"
    else:
        return f"{m['tag']}▴{m['n']}|{m['hash']}"


def overlaps(a: str, b: str) -> bool:
    """Return true iff either string contains the other"""
    return a in b or b in a


class Git(Backend):
    async def git(self, *args: str) -> str | None:
        return await self.ctx.cmd.exec("git", *args)

    async def branch(self) -> Chunk | None:
        icon, name = await asyncio.gather(self.branch_icon(), self.branch_name())
        if icon is None and name is None:
            return None
        return Chunk(icon=icon, info=name)

    async def branch_icon(self) -> str | None:
        local, origin = await asyncio.gather(
            self.abbrev_ref("HEAD"), self.abbrev_ref("origin/HEAD")
        )
        if local is None:
            return None
        elif local == "HEAD":
            return BRANCH_ICON_DETACHED
        elif local == origin:
            return BRANCH_ICON_DEFAULT
        else:
            return BRANCH_ICON_OTHER

    async def branch_name(self) -> str | None:
        """
        Return the name of the current branch; if ``HEAD`` is detached, return
        the tag it points to or, failing that, its short hash
        """
        if name := await self.git("branch", "--show-current"):
            return name
        if tag := await self.exact_tag():
            return tag
        return await self.git("rev-parse", "--short", "HEAD") or None

    async def abbrev_ref(self, ref: str) -> str | None:
        """
        Return the last path component of the symbolic name of ``ref``, e.g.,
        ``main`` for ``origin/HEAD`` pointing at ``origin/main``
        """
        if name := await self.git("rev-parse", "--abbrev-ref", ref):
            return name.rpartition("/")[2]
        return None

    async def exact_tag(self) -> str | None:
        if tag := await self.git("describe", "--tags", "--exact-match", "HEAD"):
            return tag.replace("~", "↓")
        return None

    async def name_rev(self) -> str | None:
        name = await self.git("name-rev", "--name-only", "HEAD")
        if not name or name == "undefined":
            return None
        name = name.removesuffix("^0")
        for old, new in NAME_REV_REWRITES:
            name = name.replace(old, new)
        return name

    async def describe(self) -> str | None:
        if s := await self.git("describe", "--abbrev=7", "--always", "--tags", "--long"):
            return format_describe(s)
        return None

    async def commit(self) -> Chunk | None:
        if self.ctx.options.fast:
            if rev := await self.git("rev-parse", "--short", "HEAD"):
                return Chunk.only_info(rev)
            return None
        exact, name_rev, branch = await asyncio.gather(
            self.exact_tag(), self.name_rev(), self.branch_name()
        )
        descr = exact or name_rev or await self.describe()
        if descr is None or (branch is not None and overlaps(descr, branch)):
            return None
        return Chunk.only_info(descr)

    async def status(self) -> Chunk | None:
        if s := await self.git("status", "--porcelain"):
            if icons := merge_icons(map(status_icon, s.splitlines())):
                return Chunk.only_info(icons)
        return None

    async def worktree(self) -> Chunk | None:
        s = await self.git("worktree", "list", "--porcelain")
        if s is None:
            return None
        try:
            here = self.ctx.options.workdir.resolve()
        except OSError:
            return None
        # The first entry is always the main worktree.
        for entry in s.split("\n\n")[1:]:
            for line in entry.splitlines():
                if line.startswith("worktree "):
                    path = Path(line[len("worktree ") :])
                    if here.is_relative_to(path):
                        return Chunk.new("⌂", path.name)
        return None

    async def stash(self) -> Chunk | None:
        if s := await self.git("stash", "list"):
            return Chunk.only_info(render_icon("≡", len(s.splitlines())))
        return None

    async def divergence(self) -> Chunk | None:
        ahead_s, behind_s = await asyncio.gather(
            self.git("rev-list", "--count", "HEAD@{upstream}..HEAD"),
            self.git("rev-list", "--count", "HEAD..HEAD@{upstream}"),
        )
        if ahead_s is None or behind_s is None:
            # No upstream
            return None
        try:
            ahead = int(ahead_s or "0")
            behind = int(behind_s or "0")
        except ValueError:
            return None
        s = ""
        if ahead:
            s += f"↑{ahead}"
        if behind:
            s += f"↓{behind}"
        return Chunk.only_info(s) if s else None
