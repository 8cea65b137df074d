"""
Providers that do not depend on version control.  Each one is an async
function taking the `PromptContext` and returning a `Chunk`, or `None` if it
is disabled or has nothing to show.
"""

from __future__ import annotations
from ast import literal_eval
import getpass
import logging
import os
from pathlib import Path, PurePath
from pwd import getpwuid
import re
import socket
import time
from typing import TYPE_CHECKING
from .chunk import Chunk
from .util import cat, format_duration, to_superscript

if TYPE_CHECKING:
    from .context import PromptContext

logger = logging.getLogger(__name__)

#: Default maximum display length of the path to the current working directory
MAX_CWD_LEN = 30

#: The shell integration writes the start time (in nanoseconds since the
#: epoch) of each command to this file, suffixed with the shell's PID
CMD_START_FILE = "/tmp/auraline_cmd_start"

OS_RELEASE = Path("/etc/os-release")
MEMINFO = Path("/proc/meminfo")
DEBIAN_CHROOT = Path("/etc/debian_chroot")


async def user(ctx: PromptContext) -> Chunk | None:
    if not ctx.options.user:
        return None
    try:
        return Chunk.only_info(getpass.getuser())
    except (KeyError, OSError):
        return None


async def realname(ctx: PromptContext) -> Chunk | None:
    if not ctx.options.realname:
        return None
    try:
        gecos = getpwuid(os.getuid()).pw_gecos
    except KeyError:
        return None
    if name := gecos.split(",")[0].strip():
        return Chunk.only_info(name)
    return None


async def hostname(ctx: PromptContext) -> Chunk | None:
    if not ctx.options.hostname:
        return None
    return Chunk.only_info("@" + socket.gethostname())


async def distro(ctx: PromptContext) -> Chunk | None:
    """Show the ``PRETTY_NAME`` field of :file:`/etc/os-release`"""
    if not ctx.options.distro:
        return None
    if (os_release := cat(OS_RELEASE)) is None:
        return None
    for line in os_release.splitlines():
        if m := re.fullmatch(r'PRETTY_NAME=(["\x27]?)(?P<name>.*)\1', line.strip()):
            return Chunk.only_info(m["name"]) if m["name"] else None
    return None


async def pwd(ctx: PromptContext) -> Chunk | None:
    if not ctx.options.pwd:
        return None
    return Chunk.only_info(cwdstr(ctx.options.workdir, short=ctx.options.short))


async def full_pwd(ctx: PromptContext) -> Chunk | None:
    if not ctx.options.full_pwd:
        return None
    return Chunk.only_info(str(ctx.options.workdir))


async def virt(ctx: PromptContext) -> Chunk | None:
    """Show the virtualization technology we are running under, if any"""
    if not ctx.options.virt:
        return None
    v = await ctx.cmd.exec("systemd-detect-virt")
    if not v or v == "none":
        return None
    return Chunk.only_info(v)


async def memory(ctx: PromptContext) -> Chunk | None:
    """Show the percentage of memory in use"""
    if not ctx.options.memory:
        return None
    if (meminfo := cat(MEMINFO)) is None:
        return None
    fields: dict[str, int] = {}
    for line in meminfo.splitlines():
        if m := re.fullmatch(r"(\w+):\s*(\d+)(?:\s*kB)?", line.strip()):
            fields[m[1]] = int(m[2])
    total = fields.get("MemTotal")
    available = fields.get("MemAvailable")
    if not total or available is None:
        return None
    return Chunk.only_info(f"{(total - available) / total * 100:.1f}%")


async def ssh(ctx: PromptContext) -> Chunk | None:
    """Show the server address & port of the current SSH connection"""
    if not ctx.options.ssh:
        return None
    # $SSH_CONNECTION is "client_ip client_port server_ip server_port"
    parts = os.environ.get("SSH_CONNECTION", "").split()
    if len(parts) < 4:
        return None
    return Chunk.only_info(f"⇄{parts[2]}:{parts[3]}")


async def netns(ctx: PromptContext) -> Chunk | None:
    """Show the name of the network namespace we are in, if any"""
    if not ctx.options.netns:
        return None
    if ns := await ctx.cmd.exec("ip", "netns", "identify"):
        return Chunk.only_info("⁅" + ns)
    return None


async def venv(ctx: PromptContext) -> Chunk | None:
    """
    If we're inside a Python virtualenv, show its custom prompt prefix, if
    set, or else the basename of the virtualenv directory.  Otherwise, if a
    Conda environment is active, show its name.
    """
    if not ctx.options.venv:
        return None
    if (name := venv_prompt()) is None:
        name = os.environ.get("CONDA_DEFAULT_ENV")
    return Chunk.only_info(f"({name})") if name else None


async def chroot(ctx: PromptContext) -> Chunk | None:
    """Show the chroot we're working in (if any)"""
    if not ctx.options.chroot:
        return None
    if c := cat(DEBIAN_CHROOT):
        return Chunk.only_info(f"[{c}]")
    return None


async def duration(ctx: PromptContext) -> Chunk | None:
    """Show how long the last command took to run"""
    if not ctx.options.duration:
        return None
    end = time.time_ns()
    path = Path(f"{CMD_START_FILE}.{os.getppid()}")
    start_str = cat(path)
    if start_str is None:
        return None
    try:
        path.unlink()
    except OSError as e:
        logger.debug(f"Could not remove {path}: {e}")
    try:
        start = int(start_str)
    except ValueError:
        return None
    if end <= start:
        return None
    return Chunk.new("⏱", format_duration((end - start) / 1_000_000_000))


async def exit_code(ctx: PromptContext) -> Chunk | None:
    """Show the exit status of the last command if it failed"""
    code = ctx.options.exit_code
    if not code:
        return None
    return Chunk.new("✘", to_superscript(str(code)))


def venv_prompt() -> str | None:
    """
    If we're inside a Python virtualenv, return its custom prompt prefix, if
    set, (without parentheses) or else the basename of the virtualenv
    directory
    """
    if (venv_str := os.environ.get("VIRTUAL_ENV")) is None:
        return None
    venv = Path(venv_str)
    prompt = venv.name
    try:
        with (venv / "pyvenv.cfg").open(encoding="utf-8") as fp:
            for line in fp:
                line = line.strip()
                if m := re.match(r"^prompt\s*=\s*", line):
                    prompt = line[m.end() :]
                    if re.fullmatch(r'([\x27"]).*\1', prompt):
                        # repr-ized prompt produced by venv
                        try:
                            prompt = literal_eval(prompt)
                        except (ValueError, SyntaxError):
                            pass
                    break
    except (OSError, UnicodeDecodeError):
        pass
    return prompt


def cwdstr(cwd: Path, short: bool = False) -> str:
    """
    Show the path to the given directory.  If the directory is at or under
    :envvar:`HOME`, the path will start with ``~/``.  If ``short`` is true,
    the path will also be truncated to be no more than `MAX_CWD_LEN`
    characters long.
    """
    p: PurePath = cwd
    try:
        p = "~" / cwd.relative_to(Path.home())
    except (ValueError, RuntimeError):
        pass
    return shortpath(p) if short else str(p)


def shortpath(p: PurePath, max_len: int = MAX_CWD_LEN) -> str:
    """
    If the filepath ``p`` is too long (longer than ``max_len``), cut off
    leading components to make it fit; if that's not enough, also truncate the
    final component.  Deleted bits are replaced with ellipses.
    """
    assert len(p.parts) > 0
    if len(str(p)) > max_len:
        p = PurePath("…", *p.parts[1 + (p.parts[0] == "/") :])
        while len(str(p)) > max_len:
            if len(p.parts) > 2:
                p = PurePath("…", *p.parts[2:])
            else:
                p = PurePath("…", p.parts[1][: max_len - 3] + "…")
                assert len(str(p)) <= max_len
    return str(p)
