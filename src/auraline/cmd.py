"""
Single-flight cache over external commands.

Every provider that needs the output of an external program goes through a
`CommandCache`.  Within one run, each distinct ``(program, args)`` pair is
executed at most once: the first caller spawns the process and every other
caller, concurrent or later, receives the same result.  Failures (program not
found, non-zero exit, output that is not valid UTF-8) are cached as `None` and
never retried.
"""

from __future__ import annotations
import asyncio
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

#: A command is identified by its program name and exact argument sequence
CommandKey = tuple[str, tuple[str, ...]]


class CommandCache:
    def __init__(self, cwd: str | Path | None = None) -> None:
        #: The directory in which commands are run; `None` means the current
        #: working directory of the process
        self.cwd = cwd

        #: Number of subprocesses actually spawned (or attempted) so far
        self.spawn_count = 0

        # key -> task producing the command's output; a pending task is a
        # command in flight, a finished one holds the final answer
        self._slots: dict[CommandKey, asyncio.Task[str | None]] = {}

    async def exec(self, program: str, *args: str) -> str | None:
        """
        Run ``program`` with ``args`` (suppressing stderr) and return its
        stdout with trailing whitespace stripped.  If the program cannot be
        started, exits nonzero, or produces output that is not valid UTF-8,
        return `None`.

        Concurrent calls with the same arguments share one subprocess.
        """
        key: CommandKey = (program, args)
        # No await between lookup and insertion, so exactly one caller creates
        # the slot for a key.
        slot = self._slots.get(key)
        if slot is None:
            slot = asyncio.ensure_future(self._run(program, args))
            self._slots[key] = slot
        return await asyncio.shield(slot)

    def __contains__(self, key: CommandKey) -> bool:
        return key in self._slots

    async def _run(self, program: str, args: tuple[str, ...]) -> str | None:
        self.spawn_count += 1
        cmdline = " ".join((program, *args))
        logger.debug(f"Running {cmdline!r}")
        try:
            process = await asyncio.create_subprocess_exec(
                program,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                cwd=os.fspath(self.cwd) if self.cwd is not None else None,
            )
            stdout, _ = await process.communicate()
        except OSError as e:
            logger.debug(f"Could not run {cmdline!r}: {e}")
            return None
        if process.returncode != 0:
            logger.debug(f"{cmdline!r} exited with code {process.returncode}")
            return None
        try:
            output = stdout.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug(f"{cmdline!r} produced output that is not valid UTF-8")
            return None
        return output.rstrip()
