"""
Colors, style classes, themes, and the shell-specific escaping needed to put
styled text in a prompt.

Segments never name colors directly.  Each piece of text is tagged with a
`StyleClass`; a theme maps style classes to a `Style`, and a `Styler` turns a
`Style` into the escape sequences of the target shell.  `Painter` ties the
latter two together.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Protocol


class Color(Enum):
    """Foreground colors, valued by their xterm palette index"""

    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    LIGHT_RED = 9
    LIGHT_GREEN = 10
    LIGHT_YELLOW = 11
    LIGHT_BLUE = 12
    LIGHT_MAGENTA = 13
    LIGHT_CYAN = 14

    @property
    def sgr(self) -> int:
        # Palette entries 8-15 are the "bright" colors, SGR 90-97
        n = self.value
        return 30 + n if n < 8 else 82 + n


@dataclass(frozen=True)
class Style:
    color: Color | None = None
    bold: bool = False

    def sgr(self) -> str | None:
        """
        Return the parameters of the SGR escape sequence selecting this style,
        e.g. ``"92;1"``, or `None` for unstyled text
        """
        params = []
        if self.color is not None:
            params.append(str(self.color.sgr))
        if self.bold:
            params.append("1")
        return ";".join(params) or None


class Styler(Protocol):
    #: The prompt character that the shell integration appends after the
    #: rendered line
    prompt_suffix: ClassVar[str]

    def __call__(self, s: str, style: Style) -> str: ...


class ANSIStyler:
    """Styles text for printing straight to a terminal"""

    prompt_suffix: ClassVar[str] = "$"

    def __call__(self, s: str, style: Style) -> str:
        if (params := style.sgr()) is None:
            return s
        return f"\x1B[{params}m{s}\x1B[m"


class BashStyler:
    """Escapes & styles text for inclusion in Bash's ``PS1``"""

    prompt_suffix: ClassVar[str] = r"\$"

    def __call__(self, s: str, style: Style) -> str:
        r"""
        Escape ``s`` for ``PS1`` and, if ``style`` calls for it, wrap it in
        SGR sequences.  The sequences are bracketed with ``\[ ... \]`` so that
        Bash does not count them towards the width of the prompt.
        """
        s = s.replace("\\", r"\\")
        if (params := style.sgr()) is None:
            return s
        return rf"\[\e[{params}m\]{s}\[\e[m\]"


class ZshStyler:
    """Escapes & styles text for inclusion in zsh's ``PS1``"""

    prompt_suffix: ClassVar[str] = "%#"

    def __call__(self, s: str, style: Style) -> str:
        # zsh has its own width-aware markup, so no raw escapes are needed
        s = s.replace("%", "%%")
        if style.bold:
            s = f"%B{s}%b"
        if style.color is not None:
            s = f"%F{{{style.color.value}}}{s}%f"
        return s


STYLERS: dict[str, type[Styler]] = {
    "ansi": ANSIStyler,
    "bash": BashStyler,
    "zsh": ZshStyler,
}

StyleClass = Enum(
    "StyleClass",
    [
        "PLAIN",
        "ICON",
        "USER",
        "HOST",
        "DISTRO",
        "CWD",
        "VIRT",
        "MEMORY",
        "SSH",
        "NETNS",
        "VENV",
        "CHROOT",
        "VCS_BRANCH",
        "VCS_STATUS",
        "VCS_STASH",
        "VCS_WORKTREE",
        "VCS_COMMIT",
        "VCS_DIVERGENCE",
        "DURATION",
        "EXIT_ICON",
        "EXIT_CODE",
    ],
)

Theme = dict[StyleClass, Style]

DARK_THEME: Theme = {
    StyleClass.PLAIN: Style(),
    StyleClass.ICON: Style(bold=True),
    StyleClass.USER: Style(Color.LIGHT_GREEN, bold=True),
    StyleClass.HOST: Style(Color.LIGHT_RED),
    StyleClass.DISTRO: Style(Color.LIGHT_BLUE),
    StyleClass.CWD: Style(Color.LIGHT_CYAN),
    StyleClass.VIRT: Style(Color.MAGENTA, bold=True),
    StyleClass.MEMORY: Style(Color.YELLOW),
    StyleClass.SSH: Style(Color.CYAN),
    StyleClass.NETNS: Style(Color.BLUE, bold=True),
    StyleClass.VENV: Style(),
    StyleClass.CHROOT: Style(Color.BLUE, bold=True),
    StyleClass.VCS_BRANCH: Style(Color.LIGHT_GREEN, bold=True),
    StyleClass.VCS_STATUS: Style(Color.RED, bold=True),
    StyleClass.VCS_STASH: Style(Color.LIGHT_YELLOW, bold=True),
    StyleClass.VCS_WORKTREE: Style(Color.LIGHT_MAGENTA),
    StyleClass.VCS_COMMIT: Style(Color.LIGHT_BLUE, bold=True),
    StyleClass.VCS_DIVERGENCE: Style(Color.GREEN),
    StyleClass.DURATION: Style(Color.LIGHT_YELLOW),
    StyleClass.EXIT_ICON: Style(Color.RED, bold=True),
    StyleClass.EXIT_CODE: Style(Color.RED, bold=True),
}

#: For terminals with a light background: the bright colors are swapped for
#: their darker counterparts where they would be hard to read
LIGHT_THEME: Theme = DARK_THEME | {
    StyleClass.USER: Style(Color.GREEN, bold=True),
    StyleClass.CWD: Style(Color.BLUE),
    StyleClass.VCS_BRANCH: Style(Color.GREEN, bold=True),
    StyleClass.VCS_COMMIT: Style(Color.BLUE, bold=True),
    StyleClass.DURATION: Style(Color.YELLOW),
}

PLAIN_THEME: Theme = {klass: Style() for klass in StyleClass}

THEMES = {
    "dark": DARK_THEME,
    "light": LIGHT_THEME,
    "plain": PLAIN_THEME,
}


@dataclass
class Painter:
    """Renders text of a given style class for a particular shell & theme"""

    styler: Styler
    theme: Theme

    def __call__(self, s: str, klass: StyleClass) -> str:
        return self.styler(s, self.theme[klass])
