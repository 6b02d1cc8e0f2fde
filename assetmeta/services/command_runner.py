from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol


logger = logging.getLogger(__name__)


class CommandError(Exception):
	"""The command could not be run to completion (missing executable, timeout)."""


@dataclass(frozen=True)
class CommandResult:
	returncode: int
	stdout: str = ""
	stderr: str = ""

	@property
	def ok(self) -> bool:
		return self.returncode == 0


class CommandRunner(Protocol):
	def run(self, args: List[str], timeout: Optional[float] = None) -> CommandResult:
		...


class SubprocessRunner:
	"""Runs a command without a shell and captures its output as text."""

	def run(self, args: List[str], timeout: Optional[float] = None) -> CommandResult:
		logger.info("Running command: %s", " ".join(args))
		try:
			proc = subprocess.run(
				args,
				capture_output=True,
				text=True,
				errors="replace",
				timeout=timeout,
				check=False,
			)
		except FileNotFoundError as e:
			raise CommandError(f"{args[0]}: executable not found") from e
		except subprocess.TimeoutExpired as e:
			raise CommandError(f"{args[0]}: timed out after {timeout}s") from e
		except (OSError, ValueError) as e:
			# not executable, bad interpreter, NUL byte in an argument
			raise CommandError(f"{args[0]}: cannot run: {e}") from e
		return CommandResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
