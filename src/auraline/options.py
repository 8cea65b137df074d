from __future__ import annotations
import argparse
from collections.abc import Mapping
from dataclasses import dataclass
import logging
import os
from pathlib import Path
import shlex
from .styles import THEMES

logger = logging.getLogger(__name__)

DEFAULT_THEME = "dark"

#: Names of the optional providers that are switched on by a flag of the same
#: name
PROVIDER_FLAGS = (
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
    "duration",
)


@dataclass(frozen=True)
class Options:
    """Fully resolved configuration for a single prompt rendering"""

    #: The directory to describe; `None` means the current directory
    path: Path | None = None

    #: Name of the color theme, a key of `THEMES`
    theme: str = DEFAULT_THEME

    #: Skip the slower VCS queries (e.g., ``git name-rev``)
    fast: bool = False

    #: Shorten long paths
    short: bool = False

    user: bool = False
    realname: bool = False
    hostname: bool = False
    distro: bool = False
    pwd: bool = False
    full_pwd: bool = False
    virt: bool = False
    memory: bool = False
    ssh: bool = False
    netns: bool = False
    venv: bool = False
    chroot: bool = False
    duration: bool = False

    #: Whether to show version-control information
    vcs: bool = True

    #: Exit status of the last command run in the shell, if known
    exit_code: int | None = None

    #: Print a per-provider timing report instead of the prompt
    timings: bool = False

    #: If set, providers that have not finished after this many seconds are
    #: left out of the prompt
    timeout: float | None = None

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> Options:
        return cls(
            path=Path(args.path) if args.path is not None else None,
            theme=args.theme,
            fast=args.fast,
            short=args.short,
            vcs=args.vcs,
            exit_code=args.exit_code,
            timings=args.timings,
            timeout=args.timeout,
            **{flag: getattr(args, flag) for flag in PROVIDER_FLAGS},
        )

    @property
    def workdir(self) -> Path:
        """The directory the prompt describes"""
        if self.path is not None:
            return self.path
        # Prefer $PWD to os.getcwd() as the former does not resolve symlinks
        return Path(os.environ.get("PWD") or os.getcwd())


def env_arguments(environ: Mapping[str, str] = os.environ) -> list[str]:
    """
    Return the extra ``prompt`` arguments given in :envvar:`AURALINE_OPTIONS`,
    split the way a shell would split them.  If the variable cannot be split,
    it is ignored.
    """
    try:
        return shlex.split(environ.get("AURALINE_OPTIONS", ""))
    except ValueError as e:
        logger.warning(f"Ignoring malformed AURALINE_OPTIONS: {e}")
        return []


def env_theme(environ: Mapping[str, str] = os.environ) -> str:
    """
    Return the theme named by :envvar:`AURALINE_THEME`, or `DEFAULT_THEME` if
    it is unset or names an unknown theme
    """
    theme = environ.get("AURALINE_THEME")
    if theme is None:
        return DEFAULT_THEME
    elif theme not in THEMES:
        logger.warning(f"Unknown theme {theme!r} in AURALINE_THEME; using {DEFAULT_THEME!r}")
        return DEFAULT_THEME
    else:
        return theme
