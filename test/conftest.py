from __future__ import annotations
import asyncio
from collections.abc import Callable
from unittest.mock import AsyncMock
import pytest
from auraline.cmd import CommandCache, CommandKey
from auraline.context import PromptContext
from auraline.options import Options
from auraline.styles import PLAIN_THEME, ANSIStyler, Painter


class FakeCommandCache(CommandCache):
    """
    A `CommandCache` that answers from a table of canned outputs instead of
    spawning processes.  Commands not in the table fail.
    """

    def __init__(self, outputs: dict[CommandKey, str]) -> None:
        super().__init__()
        self.outputs = outputs
        self.calls: list[CommandKey] = []

    async def _run(self, program: str, args: tuple[str, ...]) -> str | None:
        self.spawn_count += 1
        self.calls.append((program, args))
        await asyncio.sleep(0)
        return self.outputs.get((program, args))


@pytest.fixture
def fake_ctx() -> Callable[..., PromptContext]:
    """
    Factory fixture for a `PromptContext` whose commands are answered from a
    table.  Use it like::

        ctx = fake_ctx({("git", ("stash", "list")): "stash@{0}: WIP"}, fast=True)
    """

    def _make(
        outputs: dict[CommandKey, str] | None = None, **opts: object
    ) -> PromptContext:
        return PromptContext(
            options=Options(**opts),  # type: ignore[arg-type]
            cmd=FakeCommandCache(outputs or {}),
        )

    return _make


@pytest.fixture
def plain_paint() -> Painter:
    return Painter(ANSIStyler(), PLAIN_THEME)


@pytest.fixture
def create_proc() -> Callable[..., AsyncMock]:
    """
    Factory fixture that returns asyncio subprocess mocks.  Use it like:
        proc = create_proc(stdout=b"hello\n", returncode=0)
        with patch("asyncio.create_subprocess_exec", return_value=proc):
            ...
    """

    def _make(
        stdout: bytes = b"", returncode: int = 0, delay: float = 0.0
    ) -> AsyncMock:
        proc = AsyncMock()

        async def communicate() -> tuple[bytes, bytes | None]:
            if delay:
                await asyncio.sleep(delay)
            return stdout, None

        proc.communicate = communicate
        proc.returncode = returncode
        return proc

    return _make
