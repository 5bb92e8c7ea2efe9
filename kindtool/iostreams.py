"""The standard trio of input, output and error streams."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import IO


@dataclass
class IOStreams:
    """Input, output and error streams, kept together for easy substitution in tests."""

    stdin: IO[str]
    stdout: IO[str]
    stderr: IO[str]


def standard_iostreams() -> IOStreams:
    """Return streams bound to the process's current stdin, stdout and stderr."""
    return IOStreams(stdin=sys.stdin, stdout=sys.stdout, stderr=sys.stderr)