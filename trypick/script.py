"""Turn selection results into shell commands for the ``eval`` wrapper.

trypick never mutates the filesystem itself. The calling shell function
evaluates the script printed on stdout.
"""

from __future__ import annotations

import os
import shlex

from .selection import Cancelled, Cd, Delete, Mkdir, Rename, SelectionResult

SCRIPT_WARNING = "# if you can read this, you didn't launch try from an alias. run try --help."


def cd_commands(path: str) -> list[str]:
    quoted = shlex.quote(path)
    return ["clear", f"touch {quoted}", f"cd {quoted}"]


def mkdir_commands(path: str) -> list[str]:
    return [f"mkdir -p {shlex.quote(path)}", *cd_commands(path)]


def delete_commands(result: Delete, cwd: str) -> list[str]:
    commands = [f"cd {shlex.quote(result.base_path)}"]
    for item in result.paths:
        name = shlex.quote(item.basename)
        commands.append(f"test -d {name} && rm -rf {name}")
    commands.append(f'( cd {shlex.quote(cwd)} 2>/dev/null || cd "$HOME" )')
    return commands


def rename_commands(result: Rename) -> list[str]:
    new_path = shlex.quote(os.path.join(result.base_path, result.new_name))
    return [
        f"cd {shlex.quote(result.base_path)}",
        f"mv {shlex.quote(result.old_name)} {shlex.quote(result.new_name)}",
        f"echo {new_path}",
        f"cd {new_path}",
    ]


def build_script(result: SelectionResult, cwd: str | None = None) -> list[str]:
    """Return the commands carrying out ``result``; empty for ``Cancelled``.

    ``cwd`` is where a delete returns to afterwards and defaults to the
    process working directory.
    """
    if isinstance(result, Cd):
        return cd_commands(result.path)
    if isinstance(result, Mkdir):
        return mkdir_commands(result.path)
    if isinstance(result, Rename):
        return rename_commands(result)
    if isinstance(result, Delete):
        return delete_commands(result, cwd if cwd is not None else os.getcwd())
    if isinstance(result, Cancelled):
        return []
    raise TypeError(f"unsupported selection result: {result!r}")


def format_script(commands: list[str]) -> str:
    """Join commands into one ``&&`` chain preceded by the warning comment."""
    return SCRIPT_WARNING + "\n" + " && \\\n  ".join(commands) + "\n"
