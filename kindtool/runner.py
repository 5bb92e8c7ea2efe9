"""Running external commands behind a small, swappable interface."""

from __future__ import annotations

import codecs
import io
import os
import shlex
import subprocess
import sys
import threading
from abc import ABC, abstractmethod
from typing import IO, Any, Callable, Dict, List, Optional, Sequence

from kindtool.concurrent import aggregate_concurrent
from kindtool.errors import cause_of, with_stack

_CHUNK = 64 * 1024


class Cmd(ABC):
    """A command that can be configured and then run somewhere."""

    @abstractmethod
    def run(self) -> None:
        """Run the command, raising an error that wraps a :class:`RunError` on failure."""

    @abstractmethod
    def set_env(self, *args: str) -> "Cmd":
        """Set the environment from ``"key=value"`` entries."""

    @abstractmethod
    def set_stdin(self, reader: Any) -> "Cmd":
        """Set the stream the command reads its input from."""

    @abstractmethod
    def set_stdout(self, writer: Any) -> "Cmd":
        """Set the stream the command's standard output goes to."""

    @abstractmethod
    def set_stderr(self, writer: Any) -> "Cmd":
        """Set the stream the command's standard error goes to."""


class Cmder(ABC):
    """A factory for commands."""

    @abstractmethod
    def command(self, name: str, *args: str) -> Cmd:
        """Return a command running ``name`` with ``args``."""

    @abstractmethod
    def command_context(self, timeout: Optional[float], name: str, *args: str) -> Cmd:
        """Like :meth:`command`, but killed once ``timeout`` seconds pass."""


class RunError(Exception):
    """A command failed; holds its arguments, its combined output and the underlying error."""

    def __init__(
        self,
        command: Sequence[str],
        output: bytes = b"",
        inner: Optional[BaseException] = None,
    ):
        self.command: List[str] = list(command)
        self.output = bytes(output)
        self.inner = inner
        super().__init__(str(self))

    @property
    def cause(self) -> Optional[BaseException]:
        """The underlying error, if any."""
        return self.inner

    def __str__(self) -> str:
        inner = "<nil>" if self.inner is None else str(self.inner)
        return f'command "{self.pretty_command()}" failed with error: {inner}'

    def pretty_command(self) -> str:
        """Return the command quoted so that it could be pasted into a shell."""
        return pretty_command(self.command[0], *self.command[1:])


def _fileno(stream: Any) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


class _Sink:
    """Forwards raw output bytes to a user stream, decoding for text streams."""

    def __init__(self, writer: Any):
        self.writer = writer
        self.decoder = (
            codecs.getincrementaldecoder("utf-8")("replace")
            if isinstance(writer, io.TextIOBase)
            else None
        )
        self.error: Optional[Exception] = None

    def write(self, data: bytes, final: bool = False) -> None:
        if self.error is not None:
            return
        try:
            if self.decoder is not None:
                text = self.decoder.decode(data, final)
                if text:
                    self.writer.write(text)
            elif data:
                self.writer.write(data)
            flush = getattr(self.writer, "flush", None)
            if flush is not None:
                flush()
        except Exception as exc:  # noqa: BLE001 - reported after the command ends
            self.error = exc


def _pump(stream: IO[bytes], sink: Optional[_Sink], combined: bytearray, lock: threading.Lock) -> None:
    for chunk in iter(lambda: stream.read1(_CHUNK), b""):
        if sink is not None:
            sink.write(chunk)
        with lock:
            combined.extend(chunk)
    if sink is not None:
        sink.write(b"", final=True)


def _feed(reader: Any, pipe: IO[bytes]) -> None:
    read = getattr(reader, "read1", None) or reader.read
    try:
        while True:
            chunk = read(_CHUNK)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            pipe.write(chunk)
            pipe.flush()
    except (OSError, ValueError):
        pass
    finally:
        try:
            pipe.close()
        except OSError:
            pass


class LocalCmd(Cmd):
    """A command run as a local process."""

    def __init__(self, args: Sequence[str], timeout: Optional[float] = None):
        self.args: List[str] = list(args)
        self.timeout = timeout
        self.env: Optional[Dict[str, str]] = None
        self.stdin: Any = None
        self.stdout: Any = None
        self.stderr: Any = None

    def set_env(self, *args: str) -> "LocalCmd":
        if not args:
            self.env = None
        else:
            env: Dict[str, str] = {}
            for entry in args:
                key, _, value = entry.partition("=")
                env[key] = value
            self.env = env
        return self

    def set_stdin(self, reader: Any) -> "LocalCmd":
        self.stdin = reader
        return self

    def set_stdout(self, writer: Any) -> "LocalCmd":
        self.stdout = writer
        return self

    def set_stderr(self, writer: Any) -> "LocalCmd":
        self.stderr = writer
        return self

    def run(self) -> None:
        shared = self.stdout is self.stderr
        stdout_sink = _Sink(self.stdout) if self.stdout is not None else None
        if shared:
            stderr_sink = stdout_sink
        else:
            stderr_sink = _Sink(self.stderr) if self.stderr is not None else None

        feed_stdin = False
        if self.stdin is None:
            stdin_arg: Any = subprocess.DEVNULL
        else:
            fd = _fileno(self.stdin)
            if fd is not None:
                stdin_arg = fd
            else:
                stdin_arg = subprocess.PIPE
                feed_stdin = True

        try:
            proc = subprocess.Popen(
                self.args,
                stdin=stdin_arg,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if shared else subprocess.PIPE,
                env=self.env,
            )
        except OSError as exc:
            raise with_stack(RunError(self.args, b"", exc))

        if feed_stdin:
            threading.Thread(target=_feed, args=(self.stdin, proc.stdin), daemon=True).start()

        combined = bytearray()
        lock = threading.Lock()
        streams = [(proc.stdout, stdout_sink)]
        if not shared:
            streams.append((proc.stderr, stderr_sink))
        pumps = [
            threading.Thread(target=_pump, args=(stream, sink, combined, lock), daemon=True)
            for stream, sink in streams
        ]
        for pump in pumps:
            pump.start()

        inner: Optional[BaseException] = None
        try:
            proc.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            proc.kill()
            proc.wait()
            inner = exc
        for pump in pumps:
            pump.join()
        for stream, _ in streams:
            stream.close()

        if inner is None and proc.returncode != 0:
            inner = subprocess.CalledProcessError(proc.returncode, self.args, output=bytes(combined))
        if inner is None:
            inner = next(
                (sink.error for sink in (stdout_sink, stderr_sink) if sink is not None and sink.error is not None),
                None,
            )
        if inner is not None:
            raise with_stack(RunError(self.args, bytes(combined), inner))


class LocalCmder(Cmder):
    """Creates :class:`LocalCmd` instances."""

    def command(self, name: str, *args: str) -> LocalCmd:
        return LocalCmd([name, *args])

    def command_context(self, timeout: Optional[float], name: str, *args: str) -> LocalCmd:
        return LocalCmd([name, *args], timeout=timeout)


DEFAULT_CMDER = LocalCmder()


def command(name: str, *args: str) -> Cmd:
    """Return a command from the default cmder."""
    return DEFAULT_CMDER.command(name, *args)


def command_context(timeout: Optional[float], name: str, *args: str) -> Cmd:
    """Return a command with a timeout from the default cmder."""
    return DEFAULT_CMDER.command_context(timeout, name, *args)


def pretty_command(name: str, *args: str) -> str:
    """Return the command quoted so that it could be pasted into a shell."""
    return " ".join(shlex.quote(part) for part in (name, *args))


def run_error_for_error(err: Optional[BaseException]) -> Optional[RunError]:
    """Return the deepest :class:`RunError` in the cause chain of ``err``, or None."""
    found: Optional[RunError] = None
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        if isinstance(err, RunError):
            found = err
        err = cause_of(err)
    return found


def _scan_lines(data: bytes) -> List[str]:
    if not data:
        return []
    lines = data.decode("utf-8", "replace").split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def combined_output_lines(cmd: Cmd) -> List[str]:
    """Run ``cmd`` and return its standard output and error together, as lines."""
    buffer = io.BytesIO()
    cmd.set_stdout(buffer)
    cmd.set_stderr(buffer)
    cmd.run()
    return _scan_lines(buffer.getvalue())


def output_lines(cmd: Cmd) -> List[str]:
    """Run ``cmd`` and return its standard output as lines."""
    return _scan_lines(output(cmd))


def output(cmd: Cmd) -> bytes:
    """Run ``cmd`` and return its standard output."""
    buffer = io.BytesIO()
    cmd.set_stdout(buffer)
    cmd.run()
    return buffer.getvalue()


def inherit_output(cmd: Cmd) -> Cmd:
    """Send the output of ``cmd`` to this process's stdout and stderr."""
    cmd.set_stderr(sys.stderr)
    cmd.set_stdout(sys.stdout)
    return cmd


def run_with_stdout_reader(cmd: Cmd, reader_func: Callable[[IO[bytes]], object]) -> None:
    """Run ``cmd`` with its standard output piped into ``reader_func``."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb")
    cmd.set_stdout(writer)

    def read() -> None:
        with reader:
            reader_func(reader)

    def run() -> None:
        with writer:
            cmd.run()

    aggregate_concurrent([read, run])


def run_with_stdin_writer(cmd: Cmd, writer_func: Callable[[IO[bytes]], object]) -> None:
    """Run ``cmd`` with what ``writer_func`` writes piped to its standard input."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb")
    cmd.set_stdin(reader)

    def write() -> None:
        with writer:
            writer_func(writer)

    def run() -> None:
        with reader:
            cmd.run()

    aggregate_concurrent([write, run])