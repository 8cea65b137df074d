from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from .cmd import CommandCache
from .options import Options
from .vcs import VcsKind, detect_vcs


@dataclass
class PromptContext:
    """
    Everything a provider may consult while rendering one prompt: the resolved
    options, the run's command cache, and the shared VCS detection result
    """

    options: Options
    cmd: CommandCache = field(default_factory=CommandCache)
    _vcs_task: asyncio.Task[tuple[VcsKind, Path] | None] | None = field(
        default=None, init=False, repr=False
    )

    @classmethod
    def from_options(cls, options: Options) -> PromptContext:
        return cls(options=options, cmd=CommandCache(cwd=options.workdir))

    async def vcs(self) -> tuple[VcsKind, Path] | None:
        """
        Return the kind & root directory of the repository containing the
        working directory, or `None` if it is not in a repository.  The search
        is started by the first caller; all callers share its result.
        """
        if self._vcs_task is None:
            self._vcs_task = asyncio.ensure_future(detect_vcs(self.options.workdir))
        return await asyncio.shield(self._vcs_task)
