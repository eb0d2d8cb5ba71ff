"""Running shell commands, singly or as a sequence of typed steps."""

from __future__ import annotations

import logging
import random
import subprocess
import time
from collections.abc import Callable, Iterable
from typing import Any

logger = logging.getLogger(__name__)

RETRY_INITIAL_INTERVAL = 0.5
RETRY_MULTIPLIER = 1.5
RETRY_RANDOMIZATION = 0.5
RETRY_MAX_INTERVAL = 60.0
RETRY_MAX_ELAPSED = 15.0

_MASK = "******"


class CommandError(Exception):
    """A shell command could not be started or exited with a failure status."""

    def __init__(
        self,
        command: str,
        returncode: int | None = None,
        output: str = "",
        reason: str | None = None,
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        if reason is None:
            reason = f"exit status {returncode}"
        super().__init__(f"command execution failed ({command}): {reason}")


class RetryShell(str):
    """A shell command retried with exponential backoff until it succeeds."""


class RetrySecretShell(str):
    """A retried shell command whose secrets are masked in logs and errors."""


class SecretShell(str):
    """A shell command whose secrets are masked in logs and errors."""


class SkipShell(str):
    """A shell command that is not run."""


class LogMessage(str):
    """A message written to the log instead of being run."""


def _mask(command: str, secrets: Iterable[str]) -> str:
    for secret in secrets:
        if secret:
            command = command.replace(secret, _MASK)
    return command


def _run(argv: list[str], display: str) -> None:
    logger.debug("Running command: %s", display)
    try:
        completed = subprocess.run(argv, check=False)
    except OSError as exc:
        raise CommandError(display, reason=str(exc)) from exc
    if completed.returncode != 0:
        raise CommandError(display, completed.returncode)


def _run_in_secret(command: str, secrets: Iterable[str]) -> None:
    _run(["bash", "-c", command], _mask(command, secrets))


def _retry(action: Callable[[], None]) -> None:
    start = time.monotonic()
    interval = RETRY_INITIAL_INTERVAL
    while True:
        try:
            action()
            return
        except CommandError:
            spread = RETRY_RANDOMIZATION * interval
            delay = random.uniform(interval - spread, interval + spread)
            interval = min(interval * RETRY_MULTIPLIER, RETRY_MAX_INTERVAL)
            if time.monotonic() - start + delay > RETRY_MAX_ELAPSED:
                raise
            time.sleep(delay)


def run_command(cmd: str) -> None:
    """Run a command through bash with the terminal's standard streams."""
    _run(["bash", "-c", cmd], f"bash -c {cmd}")


def run_shell_steps(steps: Iterable[Any], secrets: Iterable[str] = ()) -> None:
    """Run steps in order, stopping at the first failure.

    A plain string is run through bash; the str subclasses of this module
    choose retrying, secret masking, skipping or logging; a callable is
    called. Other values are ignored.
    """
    secrets = tuple(secrets)
    for step in steps:
        if isinstance(step, RetryShell):
            _retry(lambda s=str(step): run_command(s))
        elif isinstance(step, RetrySecretShell):
            _retry(lambda s=str(step): _run_in_secret(s, secrets))
        elif isinstance(step, SecretShell):
            _run_in_secret(str(step), secrets)
        elif isinstance(step, SkipShell):
            continue
        elif isinstance(step, LogMessage):
            logger.info("%s", step)
        elif isinstance(step, str):
            run_command(step)
        elif callable(step):
            step()


def one_line(output: str, sep: str = "") -> str:
    """Join the lines of output with sep."""
    return output.replace("\r\n", sep).replace("\n", sep)


def run_command_with_output(cmd: str, remove_line: bool = False) -> str:
    """Run a command through bash and return its combined output.

    On failure CommandError is raised, carrying the output.
    """
    logger.debug("Running command with output: %s", cmd)
    try:
        completed = subprocess.run(
            ["bash", "-c", cmd],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=False,
        )
    except OSError as exc:
        raise CommandError(f"bash -c {cmd}", reason=str(exc)) from exc
    out = completed.stdout.decode(errors="replace")
    if remove_line:
        out = one_line(out)
    logger.debug("Command output: %s", out)
    if completed.returncode != 0:
        raise CommandError(f"bash -c {cmd}", completed.returncode, out)
    return out


def run_simple_cmd(cmd: str) -> str:
    """Run a command through bash and return its combined output."""
    return run_command_with_output(cmd, False)


def check_cmd_exists(cmd: str) -> bool:
    """Tell whether bash knows cmd as a command."""
    try:
        out = run_simple_cmd(f"type {cmd}")
    except CommandError:
        return False
    last = out.split("is")[-1]
    return bool(last) and "not found" not in last