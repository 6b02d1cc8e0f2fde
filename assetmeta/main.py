import logging
import shutil
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assetmeta.config import Settings, get_settings, setup_logging
from assetmeta.routers.metadata import router as metadata_router
from assetmeta.services.metadata import ExtractionFailed


logger = logging.getLogger(__name__)


async def extraction_failed_handler(request: Request, exc: ExtractionFailed) -> JSONResponse:
	return JSONResponse(status_code=422, content={"detail": str(exc)})


def _warn_missing_tools(settings: Settings) -> None:
	for tool, binary in (("exiftool", settings.exiftool_bin), ("imagemagick", settings.imagemagick_bin)):
		if shutil.which(binary) is None:
			logger.warning("%s not found on PATH (%s), metadata reads depending on it will fail", tool, binary)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
	settings = settings or get_settings()
	setup_logging(settings.log_level)
	_warn_missing_tools(settings)

	app = FastAPI(
		title="Asset Metadata API",
		description="File type, orientation, pixel size and JPEG quality via exiftool, with an imagemagick fallback",
		version="0.1.0",
	)
	# routes resolve settings through get_settings; pin them to the ones given here
	app.dependency_overrides[get_settings] = lambda: settings

	# CORS (adjust origins in production)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=["*"],
		allow_credentials=False,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	app.add_exception_handler(ExtractionFailed, extraction_failed_handler)
	app.include_router(metadata_router)

	return app


app = create_app()


if __name__ == "__main__":
	# Local dev server: uvicorn assetmeta.main:app --reload
	import uvicorn

	uvicorn.run("assetmeta.main:app", host="0.0.0.0", port=8000, reload=True)
