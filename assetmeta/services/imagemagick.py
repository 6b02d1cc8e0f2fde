from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from assetmeta.config import Settings
from assetmeta.services.command_runner import CommandError, CommandRunner


logger = logging.getLogger(__name__)

# ImageMagick orientation names -> EXIF orientation values
ORIENTATIONS: Dict[str, Optional[int]] = {
	"Undefined": None,
	"TopLeft": 1,
	"TopRight": 2,
	"BottomRight": 3,
	"BottomLeft": 4,
	"LeftTop": 5,
	"RightTop": 6,
	"RightBottom": 7,
	"LeftBottom": 8,
}


def imagemagick_command(file: Union[str, Path], settings: Settings) -> List[str]:
	# the 1x1+0+0 geometry only selects the first frame context, no pixels are needed
	return [settings.imagemagick_bin, f"{file}[1x1+0+0]", "json:-"]


def _orientation(value: Any) -> Optional[int]:
	if value is None or isinstance(value, int):
		return value
	return ORIENTATIONS.get(str(value))


def _image_description(data: Any) -> Optional[Dict[str, Any]]:
	if isinstance(data, list):
		data = data[0] if data else None
	if not isinstance(data, dict):
		return None
	image = data.get("image")
	return image if isinstance(image, dict) else None


def read_with_imagemagick(file: Union[str, Path], runner: CommandRunner, settings: Settings) -> Optional[Dict[str, Any]]:
	logger.info("Reading metadata with imagemagick: %s", file)
	try:
		res = runner.run(imagemagick_command(file, settings), timeout=settings.imagemagick_timeout_s)
		if not res.ok:
			raise CommandError(res.stderr.strip() or f"exited with status {res.returncode}")
		image = _image_description(json.loads(res.stdout))
		if image is None:
			logger.warning("imagemagick output for %s has no image description", file)
			return None
		geometry = image["pageGeometry"]
		# page geometry is already in pixels
		return {
			"FileType": image.get("format"),
			"Orientation": _orientation(image.get("orientation")),
			"ImageHeight": geometry["height"],
			"ImageWidth": geometry["width"],
			"JPEGQualityEstimate": image.get("quality"),
		}
	except (CommandError, ValueError, KeyError, TypeError) as e:
		logger.warning("Reading metadata using imagemagick failed with error %s", e)
		return None
