"""
Running providers concurrently and assembling their output.

Each provider runs as its own task.  The results are collected by position, so
the segments of the prompt always appear in the order in which the providers
were declared, no matter which ones finish first.  A provider that raises is
logged and treated as having nothing to show.
"""

from __future__ import annotations
import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
import logging
import time
from . import providers as p
from .chunk import Chunk
from .context import PromptContext
from .styles import Painter
from .styles import StyleClass as SC
from .util import format_duration
from .vcs import VcsOp, dispatch, get_backend

logger = logging.getLogger(__name__)

ProviderFunc = Callable[[PromptContext], Awaitable["Chunk | None"]]

#: Width of the provider name column in the timing report
NAME_WIDTH = 40

#: Width of the duration column in the timing report
DURATION_WIDTH = 15


@dataclass(frozen=True)
class Provider:
    #: A stable name identifying the provider in timing reports
    name: str

    #: Computes the provider's chunk
    func: ProviderFunc

    #: Style class for the chunk's icon
    icon_style: SC = SC.ICON

    #: Style class for the chunk's information text
    info_style: SC = SC.PLAIN

    @classmethod
    def vcs(cls, op: VcsOp, icon_style: SC, info_style: SC) -> Provider:
        """
        Construct a provider that performs ``op`` on the repository containing
        the working directory, if there is one
        """

        async def func(ctx: PromptContext) -> Chunk | None:
            if not ctx.options.vcs:
                return None
            if (found := await ctx.vcs()) is None:
                return None
            kind, root = found
            return await dispatch(get_backend(kind, ctx, root), op)

        return cls(
            name=f"vcs::{op.value}",
            func=func,
            icon_style=icon_style,
            info_style=info_style,
        )

    async def run(self, ctx: PromptContext) -> Chunk | None:
        chunk = await self.func(ctx)
        if chunk is not None:
            chunk = chunk.with_style(self.icon_style, self.info_style)
        return chunk


@dataclass(frozen=True)
class Segment:
    """The outcome of running one provider"""

    name: str

    #: Wall-clock time taken by the provider, in seconds
    elapsed: float

    chunk: Chunk | None


def default_providers() -> list[Provider]:
    """Return the providers of a full prompt in display order"""
    return [
        Provider("user", p.user, info_style=SC.USER),
        Provider("realname", p.realname, info_style=SC.USER),
        Provider("hostname", p.hostname, info_style=SC.HOST),
        Provider("distro", p.distro, info_style=SC.DISTRO),
        Provider("pwd", p.pwd, info_style=SC.CWD),
        Provider("full_pwd", p.full_pwd, info_style=SC.CWD),
        Provider("virt", p.virt, info_style=SC.VIRT),
        Provider("memory", p.memory, info_style=SC.MEMORY),
        Provider("ssh", p.ssh, info_style=SC.SSH),
        Provider("netns", p.netns, info_style=SC.NETNS),
        Provider("venv", p.venv, info_style=SC.VENV),
        Provider("chroot", p.chroot, info_style=SC.CHROOT),
        Provider.vcs(VcsOp.BRANCH, SC.ICON, SC.VCS_BRANCH),
        Provider.vcs(VcsOp.STATUS, SC.ICON, SC.VCS_STATUS),
        Provider.vcs(VcsOp.STASH, SC.ICON, SC.VCS_STASH),
        Provider.vcs(VcsOp.WORKTREE, SC.ICON, SC.VCS_WORKTREE),
        Provider.vcs(VcsOp.COMMIT, SC.ICON, SC.VCS_COMMIT),
        Provider.vcs(VcsOp.DIVERGENCE, SC.ICON, SC.VCS_DIVERGENCE),
        Provider("duration", p.duration, info_style=SC.DURATION),
        Provider("exit_code", p.exit_code, SC.EXIT_ICON, SC.EXIT_CODE),
    ]


async def run_providers(
    ctx: PromptContext,
    providers: Sequence[Provider],
    timeout: float | None = None,
) -> list[Segment]:
    """
    Run all of ``providers`` concurrently and return their results in the
    same order.  If ``timeout`` is given, providers that are still running
    after that many seconds are cancelled and their chunks are `None`.
    """
    start = time.perf_counter()
    tasks = [
        asyncio.create_task(_timed(pr, ctx), name=f"provider:{pr.name}")
        for pr in providers
    ]
    if not tasks:
        return []
    _, pending = await asyncio.wait(tasks, timeout=timeout)
    for t in pending:
        t.cancel()
    if pending:
        await asyncio.wait(pending)
    segments = []
    for pr, t in zip(providers, tasks):
        if t in pending:
            logger.debug(f"Provider {pr.name} did not finish within {timeout}s")
            segments.append(Segment(pr.name, time.perf_counter() - start, None))
        else:
            segments.append(t.result())
    return segments


async def _timed(provider: Provider, ctx: PromptContext) -> Segment:
    begin = time.perf_counter()
    try:
        chunk = await provider.run(ctx)
    except Exception as e:
        # One line per prompt; the traceback only at DEBUG
        logger.warning(f"Provider {provider.name} failed: {type(e).__name__}: {e}")
        logger.debug(f"Traceback for provider {provider.name}:", exc_info=True)
        chunk = None
    return Segment(provider.name, time.perf_counter() - begin, chunk)


def render_line(segments: Sequence[Segment], paint: Painter) -> str:
    """
    Join the rendered chunks with single spaces, skipping providers that had
    nothing to show
    """
    parts = []
    for seg in segments:
        if seg.chunk is not None and (s := seg.chunk.display(paint)):
            parts.append(s)
    return " ".join(parts)


def render_timings(segments: Sequence[Segment], paint: Painter, total: float) -> str:
    """
    Produce a report with one line per provider giving its name, running time,
    and output
    """
    lines = []
    for seg in segments:
        out = seg.chunk.display(paint) if seg.chunk is not None else "_"
        lines.append(
            f"{seg.name:<{NAME_WIDTH}} -> {format_duration(seg.elapsed):>{DURATION_WIDTH}}"
            f" : ({out})"
        )
    lines.append(f"{'total time':<{NAME_WIDTH}} -> {format_duration(total):>{DURATION_WIDTH}}")
    return "\n".join(lines)


async def build_prompt(
    ctx: PromptContext,
    paint: Painter,
    providers: Sequence[Provider] | None = None,
) -> str:
    """
    Construct & return the prompt line for the context's options, or the
    timing report if the options ask for timings
    """
    if providers is None:
        providers = default_providers()
    start = time.perf_counter()
    segments = await run_providers(ctx, providers, timeout=ctx.options.timeout)
    if ctx.options.timings:
        return render_timings(segments, paint, time.perf_counter() - start)
    else:
        return render_line(segments, paint)
