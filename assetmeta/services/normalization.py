from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Mapping, Optional

from assetmeta.services.units import to_pixels


logger = logging.getLogger(__name__)

# magnitude with an optional unit; no unit means pixels
_LENGTH_RE = re.compile(r"(\d*\.?\d+)\s?(px|cm|mm|in|pt|pc)?\b")

DIMENSION_KEYS = ("ImageHeight", "ImageWidth")


def round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


def convert_unit(value: str) -> Optional[int]:
	m = _LENGTH_RE.search(value)
	if m is None:
		logger.debug("No length found in %r", value)
		return None
	pixels = round_half_up(to_pixels(float(m.group(1)), m.group(2) or "px"))
	logger.debug("Value %r converted to %s px", value, pixels)
	return pixels


def normalize_metadata(raw: Mapping[str, Any]) -> Dict[str, Any]:
	out: Dict[str, Any] = dict(raw)
	# SVG sizes may be reported in points or other CSS units
	for key in DIMENSION_KEYS:
		if isinstance(out.get(key), str):
			out[key] = convert_unit(out[key])
	# exiftool sniffs XML content in extension-less intermediates as XMP;
	# anything XML-structured that reaches this stage is an SVG
	if out.get("FileType") == "XMP":
		out["FileType"] = "SVG"
	return out
