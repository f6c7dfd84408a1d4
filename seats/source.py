"""Obtain raw licence server output from the vendor query tool."""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from seats.errors import ConnectivityError, QueryToolError
from seats.parsers import dialect_name

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLES = {
    "simple": "lmutil",
    "verbose": "lsmon",
}

CONTINUE_PROMPT = "press enter to continue"


class LicenceSource:
    """Runs ``lmutil lmstat -a`` or ``lsmon`` and returns its stdout.

    An existing override file short-circuits the query, which allows working
    offline against a saved dump.
    """

    def __init__(
        self,
        dialect: str,
        server: str = "",
        executable: Optional[str] = None,
        override_file: Optional[str] = None,
        snapshot_file: Optional[str] = None,
        timeout: int = 60,
    ):
        self.dialect = dialect_name(dialect)
        self.server = server
        self.executable = executable or DEFAULT_EXECUTABLES[self.dialect]
        self.override_file = Path(override_file) if override_file else None
        self.snapshot_file = Path(snapshot_file) if snapshot_file else None
        self.timeout = timeout

    @property
    def override_active(self) -> bool:
        return self.override_file is not None and self.override_file.is_file()

    def command(self) -> list[str]:
        """Command line for the configured dialect."""
        if self.dialect == "simple":
            cmd = [self.executable, "lmstat", "-a"]
            if self.server:
                cmd.extend(["-c", self.server])
            return cmd
        cmd = [self.executable]
        if self.server:
            cmd.append(self.server)
        return cmd

    def fetch(self) -> str:
        """Return the full raw output of one licence query.

        Raises:
            QueryToolError: The query executable could not be run.
            ConnectivityError: The query did not finish within the timeout.
        """
        if self.override_active:
            logger.info("%s override active", self.override_file)
            return self.override_file.read_text(errors="replace")

        cmd = self.command()
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                input="\n",
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise QueryToolError(f"{self.executable} not found") from exc
        except PermissionError as exc:
            raise QueryToolError(f"{self.executable} is not executable") from exc
        except subprocess.TimeoutExpired as exc:
            raise ConnectivityError(
                f"Timed out after {self.timeout}s while querying the license server."
            ) from exc

        if result.returncode != 0:
            logger.warning(
                "%s exited with status %d: %s",
                self.executable, result.returncode, result.stderr.strip(),
            )

        output = "\n".join(
            line for line in result.stdout.splitlines()
            if CONTINUE_PROMPT not in line.lower()
        )
        self._save_snapshot(output)
        logger.info("Finished reading licence information (%d bytes)", len(output))
        return output

    def _save_snapshot(self, output: str) -> None:
        if self.snapshot_file is None:
            return
        try:
            self.snapshot_file.parent.mkdir(parents=True, exist_ok=True)
            self.snapshot_file.write_text(output)
        except OSError:
            logger.exception("Failed to write snapshot %s", self.snapshot_file)
