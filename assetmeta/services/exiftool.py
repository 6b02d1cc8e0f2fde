from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from assetmeta.config import Settings
from assetmeta.services.command_runner import CommandError, CommandRunner


logger = logging.getLogger(__name__)

FORMAT_ERROR_MARKER = "File format error"

# Only the attributes the canonical record needs
EXIFTOOL_TAGS = [
	"-Orientation",
	"-FileType",
	"-ImageHeight",
	"-ImageWidth",
	"-JPEGQualityEstimate",
]


class PrimaryStatus(enum.Enum):
	SUCCESS = "success"
	FORMAT_UNSUPPORTED = "format_unsupported"
	FAILED = "failed"


@dataclass(frozen=True)
class PrimaryResult:
	status: PrimaryStatus
	metadata: Dict[str, Any] = field(default_factory=dict)
	message: str = ""

	@property
	def ok(self) -> bool:
		return self.status is PrimaryStatus.SUCCESS


def exiftool_command(file: Union[str, Path], settings: Settings) -> List[str]:
	# -n keeps numeric values numeric instead of exiftool's print conversions
	return [settings.exiftool_bin, "-n", "-json", *EXIFTOOL_TAGS, str(file)]


def _failed(message: str) -> PrimaryResult:
	logger.warning("Reading metadata using exiftool failed: %s", message)
	return PrimaryResult(PrimaryStatus.FAILED, message=message)


def _parse_output(stdout: str) -> Optional[Dict[str, Any]]:
	data = json.loads(stdout)
	if isinstance(data, list):
		data = data[0] if data else None
	if not isinstance(data, dict):
		return None
	return data


def read_with_exiftool(file: Union[str, Path], runner: CommandRunner, settings: Settings) -> PrimaryResult:
	logger.info("Reading metadata with exiftool: %s", file)
	try:
		res = runner.run(exiftool_command(file, settings), timeout=settings.exiftool_timeout_s)
	except CommandError as e:
		return _failed(str(e))

	if not res.ok:
		stderr = res.stderr.strip()
		message = stderr or f"exiftool exited with status {res.returncode}"
		if FORMAT_ERROR_MARKER in res.stderr:
			logger.info("exiftool can't read metadata because it doesn't know the file format")
			return PrimaryResult(PrimaryStatus.FORMAT_UNSUPPORTED, message=message)
		return _failed(message)

	try:
		metadata = _parse_output(res.stdout)
	except ValueError as e:
		return _failed(f"malformed exiftool output: {e}")
	if metadata is None:
		return _failed("exiftool output holds no metadata record")
	return PrimaryResult(PrimaryStatus.SUCCESS, metadata=metadata)
