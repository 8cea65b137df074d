from __future__ import annotations
import argparse
import asyncio
import logging
import os
import sys
from . import __version__
from .context import PromptContext
from .init import SHELLS, init_script
from .options import Options, env_arguments, env_theme
from .prompt import build_prompt
from .styles import STYLERS, THEMES, Painter

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="auraline",
        description="Fast, concurrent bash/zsh prompt",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=os.environ.get("AURALINE_LOG", "WARNING").upper(),
        help="Set the level of diagnostics written to stderr  [default: WARNING]",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init = subparsers.add_parser("init", help="Print shell integration code")
    init.add_argument("shell", choices=list(SHELLS.keys()))

    prompt = subparsers.add_parser("prompt", help="Print the prompt line")
    prompt.add_argument(
        "--ansi",
        action="store_const",
        dest="styler",
        const="ansi",
        help="Format prompt for direct display",
    )
    prompt.add_argument(
        "--bash",
        action="store_const",
        dest="styler",
        const="bash",
        help="Format prompt for Bash's PS1 (default)",
    )
    prompt.add_argument(
        "--zsh",
        action="store_const",
        dest="styler",
        const="zsh",
        help="Format prompt for zsh's PS1",
    )
    prompt.add_argument(
        "-T",
        "--theme",
        choices=list(THEMES.keys()),
        help="Select the color theme to use  [default: $AURALINE_THEME or dark]",
    )
    prompt.add_argument(
        "-p",
        "--path",
        help="Describe the given directory instead of the current one",
    )
    prompt.add_argument(
        "-f", "--fast", action="store_true", help="Skip slow VCS queries"
    )
    prompt.add_argument(
        "-s", "--short", action="store_true", help="Shorten long paths"
    )
    for flag, helptext in [
        ("user", "Show the user name"),
        ("realname", "Show the user's full name"),
        ("hostname", "Show the local hostname"),
        ("distro", "Show the OS distribution"),
        ("pwd", "Show the current directory"),
        ("full-pwd", "Show the full path to the current directory"),
        ("virt", "Show the virtualization technology in use"),
        ("memory", "Show memory usage"),
        ("ssh", "Show the SSH server address"),
        ("netns", "Show the network namespace"),
        ("venv", "Show the active Python virtualenv or Conda environment"),
        ("chroot", "Show the Debian chroot"),
        ("duration", "Show how long the last command took"),
    ]:
        prompt.add_argument(f"--{flag}", action="store_true", help=helptext)
    prompt.add_argument(
        "--no-vcs",
        action="store_false",
        dest="vcs",
        help="Disable version-control integration",
    )
    prompt.add_argument(
        "--exit-code",
        type=int,
        metavar="N",
        help="Exit status of the last command",
    )
    prompt.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Leave out anything that takes longer than this to compute",
    )
    prompt.add_argument(
        "--timings",
        action="store_true",
        help="Report how long each part of the prompt takes instead of printing it",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    if "prompt" in argv:
        # Options from the environment come first so that the command line
        # takes precedence
        i = argv.index("prompt") + 1
        argv = argv[:i] + env_arguments() + argv[i:]
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        format="auraline: %(name)s: %(levelname)s: %(message)s",
        level=getattr(logging, args.log_level, logging.WARNING),
    )
    if args.command == "init":
        print(init_script(args.shell), end="")
        return
    if args.theme is None:
        args.theme = env_theme()
    options = Options.from_args(args)
    paint = Painter(styler=STYLERS[args.styler or "bash"](), theme=THEMES[options.theme])
    ctx = PromptContext.from_options(options)
    print(asyncio.run(build_prompt(ctx, paint)))


if __name__ == "__main__":
    main()
