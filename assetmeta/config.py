"""
Configuration for the metadata extraction tools.

All config keys live here. Values come from an optional YAML file and can be
overridden by ASSETMETA_* environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


DEFAULT_CONFIG_PATH = Path("assetmeta.yaml")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class ConfigValidationError(Exception):
	"""Raised when configuration validation fails."""


@dataclass
class Settings:
	exiftool_bin: str = "exiftool"
	imagemagick_bin: str = "magick"
	# exiftool is expected to answer quickly; imagemagick may need to decode a frame
	exiftool_timeout_s: float = 20.0
	imagemagick_timeout_s: float = 30.0
	log_level: str = "INFO"

	def validate(self) -> List[str]:
		errors: List[str] = []
		if not self.exiftool_bin:
			errors.append("exiftool_bin is required")
		if not self.imagemagick_bin:
			errors.append("imagemagick_bin is required")
		if self.exiftool_timeout_s <= 0:
			errors.append("exiftool_timeout_s must be > 0")
		if self.imagemagick_timeout_s <= 0:
			errors.append("imagemagick_timeout_s must be > 0")
		if not isinstance(logging.getLevelName(self.log_level.upper()), int):
			errors.append(f"unknown log_level: {self.log_level}")
		return errors


def _float_setting(env_name: str, data: Dict[str, Any], key: str, default: float) -> float:
	raw = os.environ.get(env_name, data.get(key, default))
	try:
		return float(raw)
	except (TypeError, ValueError):
		raise ConfigValidationError(f"{key} must be a number, got {raw!r}")


def load_settings(config_path: Optional[Path] = None) -> Settings:
	"""
	Load settings from a YAML file, then apply environment overrides.

	Environment variables:
	- ASSETMETA_CONFIG (YAML path, used when config_path is not given)
	- ASSETMETA_EXIFTOOL_BIN
	- ASSETMETA_IMAGEMAGICK_BIN
	- ASSETMETA_EXIFTOOL_TIMEOUT (seconds)
	- ASSETMETA_IMAGEMAGICK_TIMEOUT (seconds)
	- ASSETMETA_LOG_LEVEL
	"""
	if config_path is None:
		config_path = Path(os.environ.get("ASSETMETA_CONFIG", str(DEFAULT_CONFIG_PATH)))

	data: Dict[str, Any] = {}
	if config_path.exists():
		with config_path.open("r", encoding="utf-8") as f:
			data = yaml.safe_load(f) or {}
		if not isinstance(data, dict):
			raise ConfigValidationError(f"{config_path}: top level must be a mapping")

	settings = Settings(
		exiftool_bin=str(os.environ.get("ASSETMETA_EXIFTOOL_BIN", data.get("exiftool_bin") or "exiftool")),
		imagemagick_bin=str(os.environ.get("ASSETMETA_IMAGEMAGICK_BIN", data.get("imagemagick_bin") or "magick")),
		exiftool_timeout_s=_float_setting("ASSETMETA_EXIFTOOL_TIMEOUT", data, "exiftool_timeout_s", 20.0),
		imagemagick_timeout_s=_float_setting("ASSETMETA_IMAGEMAGICK_TIMEOUT", data, "imagemagick_timeout_s", 30.0),
		log_level=str(os.environ.get("ASSETMETA_LOG_LEVEL", data.get("log_level", "INFO"))),
	)

	errors = settings.validate()
	if errors:
		raise ConfigValidationError("; ".join(errors))
	return settings


def get_settings() -> Settings:
	return load_settings()


def setup_logging(level: str = "INFO") -> None:
	logging.basicConfig(
		level=level.upper(),
		format=LOG_FORMAT,
		datefmt="%Y-%m-%d %H:%M:%S",
	)
