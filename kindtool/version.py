"""The command-line version, following Semantic Versioning 2.0.0."""

from __future__ import annotations

import argparse
import platform
import sys
from typing import Optional, Sequence

VERSION_CORE = "0.29.0"
"""The core part of the version."""

VERSION_PRE_RELEASE = "alpha"
"""The base pre-release part of the version."""

GIT_COMMIT_COUNT = ""
"""Commits since the last release, filled in at build time."""

GIT_COMMIT = ""
"""The commit the tool was built from, filled in at build time."""


def version() -> str:
    """Return the semantic version of the tool."""
    return build_version(VERSION_CORE, VERSION_PRE_RELEASE, GIT_COMMIT, GIT_COMMIT_COUNT)


def build_version(core: str, pre_release: str, commit: str, commit_count: str) -> str:
    """Assemble a version from its core, pre-release, commit and commit count.

    Commit information is only added to pre-release versions; the commit hash
    is cut to 14 characters.
    """
    result = core
    if pre_release:
        result += "-" + pre_release
        if commit_count:
            result += "." + commit_count
        if commit:
            result += "+" + truncate(commit, 14)
    return result


def display_version() -> str:
    """Return the version with interpreter and platform details, as the command prints it."""
    return (
        f"kind v{version()} python{platform.python_version()} "
        f"{sys.platform}/{platform.machine()}"
    )


def truncate(s: str, max_len: int) -> str:
    """Return ``s`` cut to at most ``max_len`` characters."""
    if len(s) < max_len:
        return s
    return s[:max_len]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the version; with ``--quiet`` only the semantic version."""
    parser = argparse.ArgumentParser(prog="kind version", description="Prints the kind CLI version")
    parser.add_argument("-q", "--quiet", action="store_true", help="silence all stderr output")
    parser.add_argument(
        "-v",
        "--verbosity",
        type=int,
        default=0,
        help="info log verbosity, higher value produces more output",
    )
    args = parser.parse_args(argv)
    print(version() if args.quiet else display_version())
    return 0