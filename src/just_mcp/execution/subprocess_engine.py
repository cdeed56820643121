from __future__ import annotations

import asyncio
import logging
import os

from .types import ExecutionOutcome, ExecutionRequest

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "just"
TIMEOUT_EXIT_CODE = 124
TIMEOUT_MARKER = "\n[Process timed out]"
_READ_CHUNK_BYTES = 64 * 1024


async def _capture(stream: asyncio.StreamReader | None, chunks: list[bytes]) -> None:
    """Append everything read from `stream` to `chunks` until EOF.

    Example:
        ```python
        chunks: list[bytes] = []
        await _capture(process.stdout, chunks)
        ```
    """
    if stream is None:
        return
    while True:
        chunk = await stream.read(_READ_CHUNK_BYTES)
        if not chunk:
            return
        chunks.append(chunk)


def _decode(chunks: list[bytes]) -> str:
    """Join captured chunks and decode them as UTF-8.

    Example:
        ```python
        text = _decode([b"hello ", b"world"])
        ```
    """
    return b"".join(chunks).decode("utf-8", errors="replace")


def _terminate(process: asyncio.subprocess.Process) -> None:
    """Send a single SIGTERM to `process` if it is still running.

    Example:
        ```python
        _terminate(process)
        ```
    """
    try:
        process.terminate()
    except ProcessLookupError:
        # Exited between the timer firing and the signal being sent.
        logger.debug("Process %s already exited before termination", process.pid)


def _normalize_exit_code(returncode: int | None) -> int:
    """Map a subprocess return code to the reported exit code.

    Example:
        ```python
        assert _normalize_exit_code(-15) == 1
        ```
    """
    if returncode is None or returncode < 0:
        return 1
    return returncode


class SubprocessEngine:
    """Run the `just` executable directly, racing completion against a timeout.

    Example:
        ```python
        engine = SubprocessEngine(executable="just")
        ```
    """

    def __init__(self, *, executable: str = DEFAULT_EXECUTABLE) -> None:
        """Initialize the engine with the executable to spawn.

        Example:
            ```python
            engine = SubprocessEngine(executable="/usr/local/bin/just")
            ```
        """
        cleaned = executable.strip()
        if not cleaned:
            raise ValueError("SubprocessEngine requires a non-empty 'executable'")
        self._executable = cleaned

    @property
    def executable(self) -> str:
        """Name or path of the spawned executable.

        Example:
            ```python
            name = engine.executable
            ```
        """
        return self._executable

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """Spawn one process and return its captured outcome.

        Ordinary failures never raise: a nonzero exit is returned as-is, a
        timeout yields exit code 124 and a spawn error yields exit code 1
        with the error text on stderr.

        Example:
            ```python
            outcome = await engine.execute(ExecutionRequest(argv=("--color=never", "--list")))
            ```
        """
        logger.debug(
            "Spawning %s %s (cwd=%s, timeout=%sms)",
            self._executable,
            " ".join(request.argv),
            request.working_directory or ".",
            request.timeout_ms,
        )
        try:
            process = await asyncio.create_subprocess_exec(
                self._executable,
                *request.argv,
                cwd=request.working_directory or None,
                env=os.environ.copy(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.warning("Failed to start %s: %s", self._executable, exc)
            return ExecutionOutcome(stdout="", stderr=str(exc), exit_code=1)

        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        closed = asyncio.gather(
            _capture(process.stdout, stdout_chunks),
            _capture(process.stderr, stderr_chunks),
            process.wait(),
        )
        timed_out = False
        try:
            async with asyncio.timeout(request.timeout_ms / 1000):
                await asyncio.shield(closed)
        except TimeoutError:
            timed_out = True
            logger.warning(
                "Process %s timed out after %sms; sending SIGTERM",
                process.pid,
                request.timeout_ms,
            )
            _terminate(process)
            await closed
        except asyncio.CancelledError:
            _terminate(process)
            raise

        stdout = _decode(stdout_chunks)
        stderr = _decode(stderr_chunks)
        if timed_out:
            return ExecutionOutcome(
                stdout=stdout,
                stderr=stderr + TIMEOUT_MARKER,
                exit_code=TIMEOUT_EXIT_CODE,
                timed_out=True,
            )

        exit_code = _normalize_exit_code(process.returncode)
        logger.info("Process %s exited with code %s", process.pid, exit_code)
        return ExecutionOutcome(stdout=stdout, stderr=stderr, exit_code=exit_code)
