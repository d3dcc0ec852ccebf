"""
Runs git as a blocking child process.

Commands run without a timeout and are never retried: a non-zero exit code is
reported to the caller with the captured error output.
"""

import dataclasses
import logging
import os
import shlex
import shutil
import subprocess
from typing import List, Optional

from upmpack.upmpack_exceptions import ProcessFailure
from upmpack.upmpack_logger import UpmpackLogger


@dataclasses.dataclass(frozen=True)
class CommandResult:
    """Result of one command execution."""

    success: bool
    stdout: str
    stderr: str
    returncode: Optional[int] = None


class GitCommandRunner:
    """
    Executes git sub-commands in a working directory.
    """

    def __init__(self, logger: UpmpackLogger, executable: Optional[str] = None):
        """
        Args:
            logger: Logger for command outcomes
            executable: Path to git; looked up on PATH when not given
        """
        self.logger = logger
        self.executable = executable or shutil.which("git") or "git"

    def execute(self, command: str, working_dir: str) -> CommandResult:
        """
        Run ``git <command>`` in working_dir and capture its output.

        Args:
            command: The git sub-command and its arguments, e.g. "pull" or "clone <url>"
            working_dir: Directory to run the command in

        Returns:
            CommandResult; success is True only for exit code 0
        """
        if not os.path.isdir(working_dir):
            return CommandResult(False, "", f"Working directory does not exist: {working_dir}")

        args: List[str] = [self.executable, *shlex.split(command)]
        try:
            completed = subprocess.run(
                args,
                cwd=working_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as e:
            return CommandResult(False, "", f"Failed to run git command: {e}")

        return CommandResult(
            success=completed.returncode == 0,
            stdout=completed.stdout,
            stderr=completed.stderr,
            returncode=completed.returncode,
        )

    def run_checked(self, command: str, working_dir: str) -> CommandResult:
        """
        Run a command, log the outcome and raise on failure.

        Raises:
            ProcessFailure: If the command did not succeed
        """
        result = self.execute(command, working_dir)
        if result.success:
            self.logger.log(
                f"git {command} in {working_dir} succeeded: {result.stdout.strip()}",
                logging.INFO,
            )
            return result

        self.logger.log(
            f"git {command} in {working_dir} failed: {result.stderr.strip()}",
            logging.ERROR,
            sanitized_error_message=f"git command failed with exit code {result.returncode}",
        )
        raise ProcessFailure(f"git {command}", result.returncode, result.stderr)

    def version(self, working_dir: str) -> str:
        """Return the output of ``git --version``."""
        return self.run_checked("--version", working_dir).stdout.strip()

    def clone(self, url: str, working_dir: str, directory: Optional[str] = None) -> CommandResult:
        """Clone url into working_dir (optionally into a named sub-directory)."""
        command = f"clone {shlex.quote(url)}"
        if directory:
            command += f" {shlex.quote(directory)}"
        return self.run_checked(command, working_dir)

    def pull(self, working_dir: str) -> CommandResult:
        return self.run_checked("pull", working_dir)
