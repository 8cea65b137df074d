"""
Shell integration snippets, printed by ``auraline init SHELL`` and meant to be
evaluated from the shell's startup file::

    eval "$(auraline init bash)"
"""

from __future__ import annotations
from .providers import CMD_START_FILE
from .styles import BashStyler, ZshStyler

BASH_INIT = r"""
__auraline_preexec() {
    # The DEBUG trap also fires for PROMPT_COMMAND itself
    [[ $BASH_COMMAND == __auraline_* ]] && return
    if [[ -n "${__auraline_armed-}" ]]; then
        __auraline_armed=
        local now="${EPOCHREALTIME/[.,]/}"
        printf '%s' "${now}000" > "@START@.$$"
    fi
}

__auraline_precmd() {
    local last=$?
    __auraline_armed=
    PS1="$(auraline prompt --bash --exit-code "$last" --duration ${AURALINE_ARGS-})"' @SUFFIX@ '
}

__auraline_arm() {
    __auraline_armed=1
}

trap '__auraline_preexec' DEBUG
PROMPT_COMMAND="__auraline_precmd${PROMPT_COMMAND:+; $PROMPT_COMMAND}; __auraline_arm"
"""

ZSH_INIT = r"""
zmodload zsh/datetime
autoload -Uz add-zsh-hook

__auraline_preexec() {
    print -rn -- "${EPOCHREALTIME/./}" >| "@START@.$$"
}

__auraline_precmd() {
    local last=$?
    PS1="$(auraline prompt --zsh --exit-code "$last" --duration ${=AURALINE_ARGS-}) @SUFFIX@ "
}

add-zsh-hook preexec __auraline_preexec
add-zsh-hook precmd __auraline_precmd
"""

SHELLS = {
    "bash": (BASH_INIT, BashStyler.prompt_suffix),
    "zsh": (ZSH_INIT, ZshStyler.prompt_suffix),
}


def init_script(shell: str) -> str:
    """
    Return the integration snippet for ``shell``.  Raises `KeyError` if the
    shell is not supported.
    """
    template, suffix = SHELLS[shell]
    return (
        template.replace("@START@", CMD_START_FILE)
        .replace("@SUFFIX@", suffix)
        .lstrip("\n")
    )
