"""
Version-control integration.

The repository containing the working directory is found by `find_vcs()`,
which walks up the directory tree looking for the marker directory of each
supported system.  Each system has a `Backend` subclass implementing whichever
of the six operations in `VcsOp` it supports; the rest return `None`.
"""

from __future__ import annotations
import asyncio
from enum import Enum
import logging
from pathlib import Path
from typing import TYPE_CHECKING
from ..chunk import Chunk

if TYPE_CHECKING:
    from ..context import PromptContext

logger = logging.getLogger(__name__)


class VcsKind(Enum):
    """
    The supported version-control systems.  Each value is the name of the
    marker directory at the root of a repository; enumeration order is the
    order in which the markers are tested.
    """

    JJ = ".jj"
    GIT = ".git"
    HG = ".hg"
    PIJUL = ".pijul"
    DARCS = "_darcs"


class VcsOp(Enum):
    """The operations that every `Backend` answers"""

    BRANCH = "branch"
    STATUS = "status"
    STASH = "stash"
    WORKTREE = "worktree"
    COMMIT = "commit"
    DIVERGENCE = "divergence"


class Backend:
    """
    Base class for VCS backends.  Every operation returns `None` here; a
    subclass overrides the ones its version-control system supports.
    """

    def __init__(self, ctx: PromptContext, root: Path) -> None:
        self.ctx = ctx
        #: The root directory of the repository
        self.root = root

    async def branch(self) -> Chunk | None:
        """The current branch, with an icon showing how it relates to upstream"""
        return None

    async def commit(self) -> Chunk | None:
        """A human-readable description of the current revision"""
        return None

    async def status(self) -> Chunk | None:
        """A summary of the changed paths in the working copy"""
        return None

    async def worktree(self) -> Chunk | None:
        """The name of the secondary working copy we are in, if any"""
        return None

    async def stash(self) -> Chunk | None:
        """The number of shelved change sets"""
        return None

    async def divergence(self) -> Chunk | None:
        """How many commits we are ahead of and behind upstream"""
        return None


def find_vcs(start: Path) -> tuple[VcsKind, Path] | None:
    """
    Search ``start`` and its ancestors for a repository.  Returns the kind of
    the first repository found along with the directory containing its
    marker, or `None` if the filesystem root is reached without finding one.
    """
    try:
        dirpath = start.resolve()
    except OSError:
        return None
    for d in (dirpath, *dirpath.parents):
        for kind in VcsKind:
            if (d / kind.value).exists():
                logger.debug(f"Found {kind.name} repository at {d}")
                return (kind, d)
    return None


async def detect_vcs(start: Path) -> tuple[VcsKind, Path] | None:
    return await asyncio.to_thread(find_vcs, start)


def get_backend(kind: VcsKind, ctx: PromptContext, root: Path) -> Backend:
    from .darcs import Darcs
    from .git import Git
    from .hg import Hg
    from .jj import Jj
    from .pijul import Pijul

    backends: dict[VcsKind, type[Backend]] = {
        VcsKind.JJ: Jj,
        VcsKind.GIT: Git,
        VcsKind.HG: Hg,
        VcsKind.PIJUL: Pijul,
        VcsKind.DARCS: Darcs,
    }
    return backends[kind](ctx, root)


async def dispatch(backend: Backend, op: VcsOp) -> Chunk | None:
    """Perform the operation ``op`` with the given backend"""
    if op is VcsOp.BRANCH:
        return await backend.branch()
    elif op is VcsOp.STATUS:
        return await backend.status()
    elif op is VcsOp.STASH:
        return await backend.stash()
    elif op is VcsOp.WORKTREE:
        return await backend.worktree()
    elif op is VcsOp.COMMIT:
        return await backend.commit()
    else:
        assert op is VcsOp.DIVERGENCE
        return await backend.divergence()
