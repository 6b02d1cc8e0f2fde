"""
Extract Metadata - file type, orientation, pixel size and JPEG quality

Reads each file with exiftool (imagemagick when exiftool does not know the
format) and writes the records as JSON to stdout or to --output.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from assetmeta.config import ConfigValidationError, load_settings, setup_logging
from assetmeta.services.metadata import extract_metadata, write_metadata_json


logger = logging.getLogger(__name__)


def create_cli() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="assetmeta-extract",
		description="Read file type, orientation, pixel size and JPEG quality of media files",
	)
	parser.add_argument("files", nargs="+", type=Path, help="Files to read")
	parser.add_argument("-o", "--output", type=Path, help="Write JSON here instead of stdout")
	parser.add_argument("-c", "--config", type=Path, default=None, help="Path to YAML config file")
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	args = create_cli().parse_args(argv)
	try:
		settings = load_settings(args.config)
	except ConfigValidationError as e:
		print(f"Invalid configuration: {e}", file=sys.stderr)
		return 2
	setup_logging("DEBUG" if args.verbose else settings.log_level)

	metadata = extract_metadata(args.files, settings=settings)
	if args.output:
		out = write_metadata_json(metadata, args.output)
		logger.info("Saved: %s", out)
	else:
		print(json.dumps(metadata, indent=2))

	failed = [r["filename"] for r in metadata["images"] if "error" in r]
	return 1 if failed else 0


if __name__ == "__main__":
	sys.exit(main())
