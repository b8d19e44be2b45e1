"""Bounded, retried execution of the chain client executable.

Every call to ``swechaind`` goes through :class:`CommandRunner`. Each attempt
gets a fixed wall-clock budget; failed attempts are retried after a linear
delay (1 s, 2 s, ...) and the last failure is raised as a
:class:`CommandError` carrying whatever the process printed, so operators can
see why the chain client refused a request.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

logger = logging.getLogger(__name__)

COMMAND_TIMEOUT_SECONDS = 30.0
MAX_ATTEMPTS = 3

SleepFunc = Callable[[float], Awaitable[None]]


class CommandError(RuntimeError):
    """Raised when the executable keeps failing after every attempt."""

    def __init__(
        self,
        cause: str,
        *,
        argv: Sequence[str],
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
        timed_out: bool = False,
        attempts: int = 0,
    ) -> None:
        super().__init__(f"command failed: {cause}\nSTDOUT: {stdout}\nSTDERR: {stderr}")
        self.cause = cause
        self.argv = list(argv)
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.timed_out = timed_out
        self.attempts = attempts


class CommandRunner:
    """Run ``program`` with arguments, retrying failed attempts.

    The executable path is passed in explicitly rather than looked up on every
    call; tests substitute ``sys.executable`` or a stub object exposing the same
    ``run`` coroutine.
    """

    def __init__(
        self,
        program: str,
        *,
        timeout: float = COMMAND_TIMEOUT_SECONDS,
        max_attempts: int = MAX_ATTEMPTS,
        sleep: SleepFunc | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.program = program
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._sleep = sleep or asyncio.sleep

    async def run(self, *args: str) -> str:
        """Execute the program and return its stripped standard output."""

        argv = [self.program, *args]
        last_error: CommandError | None = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt == 1:
                logger.info("Executing command: %s %s", self.program, list(args))
            else:
                logger.info("Retry %d: Executing command: %s %s", attempt, self.program, list(args))

            try:
                output = await self._attempt(argv, attempt)
            except CommandError as exc:
                last_error = exc
            else:
                logger.info("Command succeeded: %s", _preview(output))
                return output

            logger.warning(
                "Attempt %d/%d failed for %s: %s",
                attempt,
                self.max_attempts,
                args[:3],
                last_error.cause,
            )
            if attempt < self.max_attempts:
                await self._sleep(float(attempt))

        assert last_error is not None
        logger.error("Command failed after %d attempts: %s", self.max_attempts, last_error)
        raise last_error

    async def _attempt(self, argv: list[str], attempt: int) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise CommandError(str(exc), argv=argv, attempts=attempt) from exc

        # Readers run alongside the wait so output printed before a kill is kept.
        stdout_reader = asyncio.ensure_future(process.stdout.read())
        stderr_reader = asyncio.ensure_future(process.stderr.read())
        timed_out = False
        try:
            try:
                await asyncio.wait_for(process.wait(), timeout=self.timeout)
            except asyncio.TimeoutError:
                timed_out = True
                await _terminate(process)
            raw_stdout, raw_stderr = await asyncio.gather(stdout_reader, stderr_reader)
        finally:
            # Cancellation of the awaiting task.
            if process.returncode is None:
                await _terminate(process)
            stdout_reader.cancel()
            stderr_reader.cancel()

        stdout = raw_stdout.decode("utf-8", errors="replace")
        stderr = raw_stderr.decode("utf-8", errors="replace")
        if timed_out:
            raise CommandError(
                f"timed out after {self.timeout:g}s",
                argv=argv,
                stdout=stdout,
                stderr=stderr,
                timed_out=True,
                attempts=attempt,
            )
        if process.returncode == 0:
            return stdout.strip()

        raise CommandError(
            f"exit status {process.returncode}",
            argv=argv,
            stdout=stdout,
            stderr=stderr,
            returncode=process.returncode,
            attempts=attempt,
        )


async def _terminate(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()


def _preview(text: str, limit: int = 200) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
