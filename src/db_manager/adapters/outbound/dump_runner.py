"""External dump tool invocation for backups.

Backups are delegated to the native command-line utilities (mongodump,
mysqldump, sqlite3). Commands are run as argument lists, never through a
shell, and credentials travel in the environment rather than argv where
the tool allows it.
"""

from __future__ import annotations

import os
import re
import subprocess
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path

from db_manager.domain.errors import BackupError
from db_manager.infrastructure.logging import get_logger

logger = get_logger(__name__)

_URI_CREDENTIALS = re.compile(r"(//)[^/@]+@")


def backup_stamp(now: datetime | None = None) -> str:
    """Timestamp used in backup file names, e.g. ``20240131-235959``."""
    return (now or datetime.now()).strftime("%Y%m%d-%H%M%S")


def redact(argv: Sequence[str]) -> list[str]:
    """Hide URI credentials before an argv is logged."""
    return [_URI_CREDENTIALS.sub(r"\1***@", arg) for arg in argv]


def run_dump(
    argv: Sequence[str],
    *,
    stdout_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> None:
    """Run a dump tool and raise if it fails.

    Args:
        argv: Command and arguments; argv[0] is the executable.
        stdout_path: File receiving the tool's stdout (mysqldump writes the
            dump to stdout). When None, stdout is captured and discarded.
        env: Extra environment variables for the child process.
        timeout: Seconds before the tool is killed.

    Raises:
        BackupError: If the executable is missing, times out, or exits
            non-zero. A partially written stdout_path is removed.
    """
    tool = Path(argv[0]).name
    child_env = {**os.environ, **env} if env else None
    logger.info("dump_tool_started", tool=tool, argv=redact(argv))

    try:
        if stdout_path is not None:
            with stdout_path.open("wb") as out:
                completed = subprocess.run(
                    list(argv),
                    stdout=out,
                    stderr=subprocess.PIPE,
                    env=child_env,
                    timeout=timeout,
                    check=False,
                )
        else:
            completed = subprocess.run(
                list(argv),
                capture_output=True,
                env=child_env,
                timeout=timeout,
                check=False,
            )
    except FileNotFoundError as e:
        _discard(stdout_path)
        raise BackupError(f"{tool} not found; install it or set its path in the backup config") from e
    except subprocess.TimeoutExpired as e:
        _discard(stdout_path)
        raise BackupError(f"{tool} timed out after {timeout} seconds") from e

    if completed.returncode != 0:
        _discard(stdout_path)
        stderr = (completed.stderr or b"").decode("utf-8", errors="replace").strip()
        logger.error("dump_tool_failed", tool=tool, returncode=completed.returncode, stderr=stderr)
        raise BackupError(f"{tool} failed with exit code {completed.returncode}: {stderr}")

    logger.info("dump_tool_finished", tool=tool)


def _discard(path: Path | None) -> None:
    if path is not None:
        path.unlink(missing_ok=True)
