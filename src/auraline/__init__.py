"""
Fast, concurrent bash/zsh prompt

``auraline`` composes a one-line shell prompt out of many small pieces of
information, computing them all concurrently so that the prompt stays quick
even when some of them need to run external programs.

Features:

- Shows the branch, status, stashes, worktree, current revision, and
  divergence from upstream of the current repository
- Supports Git, Mercurial, Jujutsu, Pijul, and Darcs repositories
- Runs each external command at most once per prompt, no matter how many
  pieces of the prompt need its output
- Can also show the user, host, distribution, current directory, memory
  usage, virtualization, SSH connection, network namespace, Python
  environment, chroot, and the duration & exit status of the last command
- Supports both Bash and zsh
- Can report how long each piece of the prompt takes to compute
"""

__version__ = "0.1.0"
__license__ = "MIT"
