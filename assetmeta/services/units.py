from __future__ import annotations

from typing import Dict


# CSS reference pixel: 96 px per inch
PX_PER_UNIT: Dict[str, float] = {
	"px": 1.0,
	"in": 96.0,
	"cm": 96.0 / 2.54,
	"mm": 96.0 / 25.4,
	"pt": 96.0 / 72.0,
	"pc": 16.0,
}


def to_pixels(magnitude: float, unit: str) -> float:
	try:
		factor = PX_PER_UNIT[unit]
	except KeyError:
		raise ValueError(f"unsupported unit: {unit!r}")
	return float(magnitude) * factor
