from __future__ import annotations
import asyncio
import logging
from pathlib import Path
import random
from unittest.mock import patch
import pytest
from auraline.chunk import Chunk
from auraline.prompt import (
    Provider,
    Segment,
    build_prompt,
    default_providers,
    render_line,
    render_timings,
    run_providers,
)
from auraline.styles import DARK_THEME, ANSIStyler, Painter
from auraline.styles import StyleClass as SC
from auraline.vcs import VcsOp


def sleeper(name: str, delay: float) -> Provider:
    async def func(ctx):
        await asyncio.sleep(delay)
        return Chunk.only_info(name)

    return Provider(name, func)


def constant(name: str, chunk: Chunk | None) -> Provider:
    async def func(ctx):
        return chunk

    return Provider(name, func)


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", range(5))
async def test_order_preserved_under_random_delays(fake_ctx, seed: int) -> None:
    rng = random.Random(seed)
    names = [f"p{i}" for i in range(12)]
    providers = [sleeper(n, rng.uniform(0, 0.03)) for n in names]
    segments = await run_providers(fake_ctx(), providers)
    assert [s.name for s in segments] == names
    assert [str(s.chunk) for s in segments] == names


@pytest.mark.asyncio
async def test_providers_run_concurrently(fake_ctx) -> None:
    providers = [sleeper(f"p{i}", 0.1) for i in range(10)]
    loop = asyncio.get_running_loop()
    start = loop.time()
    await run_providers(fake_ctx(), providers)
    assert loop.time() - start < 0.5


@pytest.mark.asyncio
async def test_failing_provider_is_isolated(
    fake_ctx, plain_paint, caplog: pytest.LogCaptureFixture
) -> None:
    async def boom(ctx):
        raise RuntimeError("kaboom")

    providers = [
        constant("before", Chunk.only_info("a")),
        Provider("boom", boom),
        constant("after", Chunk.only_info("b")),
    ]
    with caplog.at_level(logging.WARNING, logger="auraline.prompt"):
        segments = await run_providers(fake_ctx(), providers)
    assert [s.chunk for s in segments] == [
        Chunk.only_info("a"),
        None,
        Chunk.only_info("b"),
    ]
    assert render_line(segments, plain_paint) == "a b"
    assert "Provider boom failed: RuntimeError: kaboom" in caplog.text
    assert "Traceback" not in caplog.text


@pytest.mark.asyncio
async def test_failing_provider_traceback_at_debug(
    fake_ctx, caplog: pytest.LogCaptureFixture
) -> None:
    async def boom(ctx):
        raise ValueError("bad output")

    with caplog.at_level(logging.DEBUG, logger="auraline.prompt"):
        await run_providers(fake_ctx(), [Provider("boom", boom)])
    (warning,) = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert warning.exc_info is None
    (debug,) = [r for r in caplog.records if r.exc_info is not None]
    assert debug.levelno == logging.DEBUG
    assert "Traceback" in caplog.text
    assert "bad output" in caplog.text


@pytest.mark.asyncio
async def test_timeout_drops_slow_providers(fake_ctx) -> None:
    providers = [sleeper("fast", 0), sleeper("slow", 10), sleeper("also_fast", 0)]
    segments = await run_providers(fake_ctx(), providers, timeout=0.1)
    assert [s.name for s in segments] == ["fast", "slow", "also_fast"]
    assert [s.chunk for s in segments] == [
        Chunk.only_info("fast"),
        None,
        Chunk.only_info("also_fast"),
    ]


@pytest.mark.asyncio
async def test_no_providers(fake_ctx) -> None:
    assert await run_providers(fake_ctx(), []) == []


@pytest.mark.asyncio
async def test_provider_applies_styles(fake_ctx) -> None:
    pr = Provider(
        "branch",
        constant("x", Chunk.new("⟝", "main")).func,
        icon_style=SC.ICON,
        info_style=SC.VCS_BRANCH,
    )
    chunk = await pr.run(fake_ctx())
    assert chunk == Chunk("⟝", "main", SC.ICON, SC.VCS_BRANCH)
    paint = Painter(ANSIStyler(), DARK_THEME)
    assert chunk.display(paint) == "\x1B[1m⟝\x1B[m \x1B[92;1mmain\x1B[m"


def test_render_line(plain_paint) -> None:
    segments = [
        Segment("user", 0.0, Chunk.only_info("alice")),
        Segment("hostname", 0.0, None),
        Segment("vcs::branch", 0.0, Chunk.new("⎇", "dev")),
        Segment("vcs::stash", 0.0, Chunk.only_icon("≡")),
        Segment("empty", 0.0, Chunk()),
    ]
    assert render_line(segments, plain_paint) == "alice ⎇ dev ≡"


def test_render_line_nothing(plain_paint) -> None:
    assert render_line([Segment("user", 0.0, None)], plain_paint) == ""


def test_render_timings(plain_paint) -> None:
    segments = [
        Segment("user", 0.0421, Chunk.only_info("alice")),
        Segment("vcs::stash", 0.000123, None),
    ]
    assert render_timings(segments, plain_paint, 1.5) == (
        "user".ljust(40) + " -> " + "42ms".rjust(15) + " : (alice)\n"
        + "vcs::stash".ljust(40) + " -> " + "123μs".rjust(15) + " : (_)\n"
        + "total time".ljust(40) + " -> " + "1.50s".rjust(15)
    )


def test_default_providers_order() -> None:
    names = [pr.name for pr in default_providers()]
    assert names == [
        "user",
        "realname",
        "hostname",
        "distro",
        "pwd",
        "full_pwd",
        "virt",
        "memory",
        "ssh",
        "netns",
        "venv",
        "chroot",
        "vcs::branch",
        "vcs::status",
        "vcs::stash",
        "vcs::worktree",
        "vcs::commit",
        "vcs::divergence",
        "duration",
        "exit_code",
    ]
    assert len(set(names)) == len(names)


@pytest.mark.asyncio
async def test_vcs_disabled_skips_detection(fake_ctx) -> None:
    ctx = fake_ctx(vcs=False)
    with patch("auraline.vcs.find_vcs") as m:
        segments = await run_providers(
            ctx, [Provider.vcs(op, SC.ICON, SC.PLAIN) for op in VcsOp]
        )
    assert m.call_count == 0
    assert all(s.chunk is None for s in segments)
    assert ctx.cmd.spawn_count == 0


@pytest.mark.asyncio
async def test_outside_repository(fake_ctx, plain_paint, tmp_path: Path) -> None:
    ctx = fake_ctx(path=tmp_path, exit_code=2)
    with patch("auraline.vcs.find_vcs", return_value=None) as m:
        line = await build_prompt(ctx, plain_paint)
    assert line == "✘ ²"
    assert m.call_count == 1
    assert ctx.cmd.spawn_count == 0


@pytest.mark.asyncio
async def test_full_prompt_in_git_repository(
    fake_ctx, plain_paint, tmp_path: Path
) -> None:
    (tmp_path / ".git").mkdir()
    outputs = {
        ("git", ("branch", "--show-current")): "main",
        ("git", ("rev-parse", "--abbrev-ref", "HEAD")): "main",
        ("git", ("rev-parse", "--abbrev-ref", "origin/HEAD")): "origin/main",
        ("git", ("name-rev", "--name-only", "HEAD")): "main",
        ("git", ("status", "--porcelain")): "?? notes.txt",
        ("git", ("rev-list", "--count", "HEAD@{upstream}..HEAD")): "2",
        ("git", ("rev-list", "--count", "HEAD..HEAD@{upstream}")): "0",
    }
    ctx = fake_ctx(outputs, path=tmp_path, exit_code=1)
    assert await build_prompt(ctx, plain_paint) == "⟝ main ⁇ ↑2 ✘ ¹"
    # Each distinct command ran exactly once even though several providers
    # needed its output
    assert len(ctx.cmd.calls) == len(set(ctx.cmd.calls))
    assert ("git", ("branch", "--show-current")) in ctx.cmd.calls


@pytest.mark.asyncio
async def test_build_prompt_timings(fake_ctx, plain_paint) -> None:
    ctx = fake_ctx(vcs=False, timings=True, exit_code=1)
    report = await build_prompt(ctx, plain_paint)
    lines = report.splitlines()
    assert len(lines) == len(default_providers()) + 1
    assert lines[0].startswith("user".ljust(40) + " -> ")
    assert lines[0].endswith(" : (_)")
    assert lines[-2].endswith(" : (✘ ¹)")
    assert lines[-1].startswith("total time".ljust(40) + " -> ")
