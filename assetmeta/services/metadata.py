from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from assetmeta.config import Settings, get_settings
from assetmeta.services.command_runner import CommandRunner, SubprocessRunner
from assetmeta.services.exiftool import PrimaryResult, PrimaryStatus, read_with_exiftool
from assetmeta.services.imagemagick import read_with_imagemagick
from assetmeta.services.normalization import normalize_metadata, round_half_up


logger = logging.getLogger(__name__)


class ExtractionFailed(Exception):
	def __init__(self, message: str, primary: Optional[PrimaryResult] = None):
		super().__init__(f"Reading metadata from rendition failed: {message}")
		self.primary = primary


def _to_int_safe(v: Any) -> Optional[int]:
	if v is None or isinstance(v, bool):
		return None
	if isinstance(v, int):
		return v
	if isinstance(v, float):
		if not math.isfinite(v):
			return None
		return round_half_up(v)
	try:
		return int(str(v).strip())
	except ValueError:
		return None


def _to_str(v: Any) -> Optional[str]:
	if v is None:
		return None
	return v if isinstance(v, str) else str(v)


@dataclass(frozen=True)
class ImageMetadata:
	file_type: Optional[str] = None
	orientation: Optional[int] = None
	image_height: Optional[int] = None
	image_width: Optional[int] = None
	jpeg_quality_estimate: Optional[int] = None

	@classmethod
	def from_mapping(cls, raw: Mapping[str, Any]) -> "ImageMetadata":
		return cls(
			file_type=_to_str(raw.get("FileType")),
			orientation=_to_int_safe(raw.get("Orientation")),
			image_height=_to_int_safe(raw.get("ImageHeight")),
			image_width=_to_int_safe(raw.get("ImageWidth")),
			jpeg_quality_estimate=_to_int_safe(raw.get("JPEGQualityEstimate")),
		)

	def to_dict(self, drop_missing: bool = False) -> Dict[str, Any]:
		out = {
			"FileType": self.file_type,
			"Orientation": self.orientation,
			"ImageHeight": self.image_height,
			"ImageWidth": self.image_width,
			"JPEGQualityEstimate": self.jpeg_quality_estimate,
		}
		if drop_missing:
			out = {k: v for k, v in out.items() if v is not None}
		return out


def read_image_metadata(
	file: Union[str, Path],
	runner: Optional[CommandRunner] = None,
	settings: Optional[Settings] = None,
) -> ImageMetadata:
	"""
	Read the canonical metadata record of a file.

	exiftool is tried first and its output normalized. Only when exiftool
	reports a file format error is imagemagick tried; its record is returned
	as-is. Every other outcome raises ExtractionFailed.
	"""
	runner = runner or SubprocessRunner()
	settings = settings or get_settings()

	primary = read_with_exiftool(file, runner, settings)
	if primary.ok:
		return ImageMetadata.from_mapping(normalize_metadata(primary.metadata))

	if primary.status is PrimaryStatus.FORMAT_UNSUPPORTED:
		logger.info("Falling back to imagemagick for %s", file)
		fallback = read_with_imagemagick(file, runner, settings)
		if fallback is not None:
			return ImageMetadata.from_mapping(fallback)

	raise ExtractionFailed(primary.message, primary=primary)


def extract_metadata(
	paths: List[Path],
	runner: Optional[CommandRunner] = None,
	settings: Optional[Settings] = None,
) -> Dict[str, Any]:
	runner = runner or SubprocessRunner()
	settings = settings or get_settings()
	records: List[Dict[str, Any]] = []
	for p in paths:
		info: Dict[str, Any] = {"filename": p.name}
		try:
			info.update(read_image_metadata(p, runner=runner, settings=settings).to_dict())
		except ExtractionFailed as e:
			logger.error("Metadata extraction failed for %s: %s", p, e)
			info["error"] = str(e)
		records.append(info)
	return {"images": records}


def write_metadata_json(metadata: Dict[str, Any], out_path: Path) -> str:
	out_path.parent.mkdir(parents=True, exist_ok=True)
	with out_path.open("w", encoding="utf-8") as f:
		json.dump(metadata, f, indent=2)
	return str(out_path)
