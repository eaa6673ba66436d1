"""The --version flag and the ways it prints version information."""

from __future__ import annotations

import argparse
import json
import platform as _platform
import sys
from dataclasses import dataclass, field
from typing import Any

import yaml

VERSION_FLAG_NAME = "version"
_VERSION_FLAG_HELP = (
    "Print version with format and quit; Available options are 'yaml', 'json' and 'short'"
)


def _default_platform() -> str:
    return f"{sys.platform}/{_platform.machine()}"


@dataclass(frozen=True)
class VersionInfo:
    """Build information of a program."""

    major: str = ""
    minor: str = ""
    git_version: str = "v0.0.0-master+$Format:%H$"
    git_commit: str = "$Format:%H$"
    git_tree_state: str = ""
    build_date: str = "1970-01-01T00:00:00Z"
    runtime_version: str = field(default_factory=_platform.python_version)
    compiler: str = field(default_factory=_platform.python_implementation)
    platform: str = field(default_factory=_default_platform)

    def to_dict(self, program_name: str) -> dict[str, Any]:
        """Return the serialisable form, led by the program name."""
        return {
            "programName": program_name,
            "major": self.major,
            "minor": self.minor,
            "gitVersion": self.git_version,
            "gitCommit": self.git_commit,
            "gitTreeState": self.git_tree_state,
            "buildDate": self.build_date,
            "runtimeVersion": self.runtime_version,
            "compiler": self.compiler,
            "platform": self.platform,
        }


def add_version_flag(parser: argparse.ArgumentParser) -> None:
    """Add --version; given without a value it means "short"."""
    parser.add_argument(
        f"--{VERSION_FLAG_NAME}",
        dest=VERSION_FLAG_NAME,
        nargs="?",
        const="short",
        default="",
        metavar="FORMAT",
        help=_VERSION_FLAG_HELP,
    )


def format_version(program_name: str, output: str, info: VersionInfo | None = None) -> str | None:
    """Render version information in the requested format.

    Returns None when no output was requested and raises ValueError for an
    unknown format.
    """
    info = info if info is not None else VersionInfo()
    if output == "":
        return None
    if output == "short":
        return f"{program_name} version: {info.git_version}"
    if output == "yaml":
        return yaml.safe_dump(info.to_dict(program_name), default_flow_style=False, sort_keys=True)
    if output == "json":
        return json.dumps(info.to_dict(program_name), indent=2)
    raise ValueError(f'invalid output format "{output}"')


def print_and_exit_if_requested(
    program_name: str, output: str, info: VersionInfo | None = None
) -> None:
    """Print the version and exit with status 0 if it was asked for."""
    text = format_version(program_name, output, info)
    if text is None:
        return
    print(text)
    raise SystemExit(0)