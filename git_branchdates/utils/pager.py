"""Pager handling: stream report output through less (or $GIT_PAGER/$PAGER)."""

import os
import shutil
import subprocess
import sys
from contextlib import contextmanager
from typing import Dict, Iterator, Mapping, Optional, TextIO

from git_branchdates.constants import DEFAULT_LESS, DEFAULT_PAGER
from git_branchdates.logging_config import get_logger

logger = get_logger(__name__)


def pager_command(environ: Mapping[str, str]) -> Optional[str]:
    """Pager to run, in git's order of preference; None when paging is a no-op."""
    command = environ.get("GIT_PAGER")
    if command is None:
        command = environ.get("PAGER", DEFAULT_PAGER)
    command = command.strip()
    if not command or command == "cat":
        return None
    return command


def terminal_size():
    """Size of the controlling terminal, even when stdout is redirected."""
    for stream in (sys.stderr, sys.stdin):
        try:
            return os.get_terminal_size(stream.fileno())
        except (OSError, ValueError, AttributeError):
            continue
    return shutil.get_terminal_size()


def pager_environment(environ: Mapping[str, str], forced: bool) -> Dict[str, str]:
    """
    Environment for the pager process.

    LESS defaults to FRX like git does. When paging was forced onto output
    that is not a terminal, less cannot measure the screen itself, so LINES
    and COLUMNS are recomputed from the controlling terminal.
    """
    env = dict(environ)
    env.setdefault("LESS", DEFAULT_LESS)
    if forced:
        size = terminal_size()
        env["LINES"] = str(size.lines)
        env["COLUMNS"] = str(size.columns)
    return env


def is_interactive(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


@contextmanager
def open_output(use_pager: bool, stdout: Optional[TextIO] = None) -> Iterator[TextIO]:
    """
    Yield the stream the report is written to.

    Args:
        use_pager: Pipe the report through the pager
        stdout: Fallback/target stream (default sys.stdout)
    """
    stdout = stdout or sys.stdout
    command = pager_command(os.environ) if use_pager else None
    if command is None:
        try:
            yield stdout
            stdout.flush()
        except BrokenPipeError:
            logger.debug("Output closed early")
        return

    env = pager_environment(os.environ, forced=not is_interactive(stdout))
    logger.debug(f"Starting pager: {command}")
    process = subprocess.Popen(
        command, shell=True, stdin=subprocess.PIPE, env=env, text=True, encoding="utf-8"
    )
    assert process.stdin is not None
    try:
        yield process.stdin
    except BrokenPipeError:
        logger.debug("Pager exited before reading all output")
    finally:
        try:
            process.stdin.close()
        except BrokenPipeError:
            pass
        process.wait()
