"""AI commit message generator integration.

The generator is an external program (``aicommit`` by default) that writes
a commit message candidate to stdout, possibly slowly, one word at a time.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
import time
from typing import Callable, Iterator, Optional, TextIO

from gitwalk.errors import GeneratorError, GeneratorUnavailableError
from gitwalk.git.utils import is_command_installed

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str], None]


def iter_chunks(stream: TextIO) -> Iterator[str]:
    """Yield whitespace-delimited chunks as soon as each one is complete.

    Each chunk keeps its trailing whitespace so that joining all chunks
    reproduces the stream exactly.
    """
    buffer: list[str] = []
    while True:
        char = stream.read(1)
        if not char:
            break
        buffer.append(char)
        if char.isspace():
            yield "".join(buffer)
            buffer = []
    if buffer:
        yield "".join(buffer)


class CommitMessageGenerator:
    """Runs the commit message generator and streams its output."""

    def __init__(
        self,
        command: str = "aicommit",
        args: Optional[list[str]] = None,
        stream_delay: float = 0.0,
        install_hint: Optional[str] = None,
        cwd: Optional[str] = None,
    ):
        self.command = command
        self.args = list(args or [])
        self.stream_delay = stream_delay
        self.install_hint = install_hint
        self.cwd = cwd

    def is_available(self) -> bool:
        return is_command_installed(self.command)

    def generate(self, on_chunk: Optional[ChunkCallback] = None) -> str:
        """Run the generator and return the accumulated message.

        Blocks until the process has exited and its stdout is drained.

        Raises:
            GeneratorUnavailableError: If the command is not installed.
            GeneratorError: If it exits non-zero or produces no message.
        """
        if not self.is_available():
            raise GeneratorUnavailableError(self.command, self.install_hint)

        cmd = [self.command] + self.args
        logger.debug(f"Starting commit message generator: {' '.join(cmd)}")

        chunks: list[str] = []
        # stderr is collected in a file, never a pipe, while stdout streams
        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_file:
            try:
                process = subprocess.Popen(
                    cmd,
                    cwd=self.cwd,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    text=True,
                )
            except OSError as e:
                raise GeneratorError(self.command, str(e)) from e

            with process:
                for chunk in iter_chunks(process.stdout):
                    chunks.append(chunk)
                    if on_chunk:
                        on_chunk(chunk)
                    if self.stream_delay:
                        time.sleep(self.stream_delay)
                returncode = process.wait()

            stderr_file.seek(0)
            stderr = stderr_file.read()

        if returncode != 0:
            raise GeneratorError(
                self.command,
                f"exited with code {returncode}",
                stderr=stderr,
            )

        message = "".join(chunks).strip()
        if not message:
            raise GeneratorError(self.command, "produced an empty message", stderr=stderr)

        logger.debug(f"Generated commit message ({len(message)} chars)")
        return message
