from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile

from assetmeta.config import Settings, get_settings
from assetmeta.services.command_runner import CommandRunner, SubprocessRunner
from assetmeta.services.metadata import read_image_metadata


router = APIRouter(prefix="/metadata", tags=["metadata"])


def get_runner() -> CommandRunner:
	return SubprocessRunner()


def _safe_name(filename: str) -> str:
	name = Path(filename).name
	return name if name not in ("", ".", "..") else "upload.bin"


# sync route: FastAPI runs it in the threadpool while the tools block
@router.post("/read", summary="Read image metadata from an uploaded file")
def read_metadata(
	file: UploadFile = File(...),
	runner: CommandRunner = Depends(get_runner),
	settings: Settings = Depends(get_settings),
):
	name = _safe_name(file.filename or "upload.bin")
	with tempfile.TemporaryDirectory(prefix="assetmeta-") as tmp:
		# keep the original name, the tools rely on its extension
		p = Path(tmp) / name
		with p.open("wb") as f:
			shutil.copyfileobj(file.file, f)
		# ExtractionFailed is turned into a 422 by the app's exception handler
		metadata = read_image_metadata(p, runner=runner, settings=settings)
	return {"filename": name, "metadata": metadata.to_dict()}


@router.get("/health", summary="Check that the metadata tools are installed")
def health(settings: Settings = Depends(get_settings)):
	tools = {
		"exiftool": shutil.which(settings.exiftool_bin) is not None,
		"imagemagick": shutil.which(settings.imagemagick_bin) is not None,
	}
	return {"status": "ok" if all(tools.values()) else "degraded", "tools": tools}
