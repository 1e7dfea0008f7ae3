"""HTTP API for the admin tool.

Usage:
    python -m divine_admin.server
    python -m divine_admin.server --config ./config.json --port 3000

Endpoints:
    GET    /api/config            current document/assets paths
    POST   /api/config            validate and switch paths
    GET    /api/data              the whole document (empty on read failure)
    POST   /api/gods              multipart: name, displayOrder, image
    POST   /api/songs             multipart: title, godId, languageDefault,
                                  duration, displayOrder, audio,
                                  lyricsTeluguFile, lyricsEnglishFile
    DELETE /api/gods/{godId}
    DELETE /api/songs/{songId}
    POST   /api/preview-god       {"name": ...}
    POST   /api/preview-song      {"godId": ...}
    POST   /api/browse-file       common folder suggestions
"""

import argparse
import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from divine_admin.config import Config, configure
from divine_admin.errors import (
    CatalogError,
    CatalogIOError,
    NotFoundError,
)
from divine_admin.service import CatalogService, god_display_name

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    NotFoundError.kind: 404,
    CatalogIOError.kind: 500,
    CatalogError.kind: 500,
}


class ConfigUpdate(BaseModel):
    jsonPath: Optional[str] = None
    assetsPath: Optional[str] = None
    androidProjectPath: Optional[str] = None


class GodPreview(BaseModel):
    name: Optional[str] = None


class SongPreview(BaseModel):
    godId: Optional[str] = None


def error_status(error: CatalogError) -> int:
    return STATUS_BY_KIND.get(error.kind, 400)


@contextmanager
def staging_area(uploads_dir: Path):
    """Per-request folder under ``uploads_dir``, removed with whatever is left in it."""
    uploads_dir.mkdir(parents=True, exist_ok=True)
    staging_dir = Path(tempfile.mkdtemp(dir=uploads_dir))
    try:
        yield staging_dir
    finally:
        shutil.rmtree(staging_dir, ignore_errors=True)


def stage_upload(upload: Optional[UploadFile], staging_dir: Path) -> Optional[Path]:
    """Write an uploaded file to the staging folder under its base name."""
    if upload is None or not upload.filename:
        return None
    filename = Path(upload.filename.replace("\\", "/")).name
    if not filename:
        return None
    staged = staging_dir / filename
    if staged.exists():
        # Same base name as another file of this request.
        staged = Path(tempfile.mkdtemp(dir=staging_dir)) / filename
    with staged.open("wb") as f:
        shutil.copyfileobj(upload.file, f)
    return staged


def create_app(service: CatalogService) -> FastAPI:
    app = FastAPI(title="Divine Blessing Admin Tool")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.service = service

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        status = error_status(exc)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status, content={"error": str(exc), "kind": exc.kind})

    @app.get("/api/config")
    def get_config():
        config = service.config
        return {"jsonPath": str(config.document_path), "assetsPath": str(config.assets_root)}

    @app.post("/api/config")
    def set_config(update: ConfigUpdate):
        config = configure(
            service.config,
            json_path=update.jsonPath,
            assets_path=update.assetsPath or update.androidProjectPath,
        )
        service.reconfigure(config)
        return {
            "message": "Configuration updated successfully! Both paths are valid and accessible.",
            "config": {"jsonPath": config.json_path, "assetsPath": config.assets_path},
        }

    @app.get("/api/data")
    def get_data():
        return service.get_data()

    @app.post("/api/gods")
    def add_god(
        name: str = Form(""),
        displayOrder: str = Form("0"),
        image: Optional[UploadFile] = File(None),
    ):
        with staging_area(service.config.uploads_path) as staging:
            god = service.add_god(name, displayOrder, stage_upload(image, staging))
        return {
            "message": "God added successfully",
            "god": god,
            "autoGenerated": {"id": god["id"], "name": god["name"]},
        }

    @app.post("/api/songs")
    def add_song(
        title: str = Form(""),
        godId: str = Form(""),
        languageDefault: str = Form(""),
        duration: str = Form("0"),
        displayOrder: str = Form("0"),
        audio: Optional[UploadFile] = File(None),
        lyricsTeluguFile: Optional[UploadFile] = File(None),
        lyricsEnglishFile: Optional[UploadFile] = File(None),
    ):
        with staging_area(service.config.uploads_path) as staging:
            song = service.add_song(
                title,
                godId,
                language_default=languageDefault,
                audio_path=stage_upload(audio, staging),
                lyrics_telugu_path=stage_upload(lyricsTeluguFile, staging),
                lyrics_english_path=stage_upload(lyricsEnglishFile, staging),
                duration=duration,
                display_order=displayOrder,
            )
        return {
            "message": "Song added successfully",
            "song": song,
            "autoGenerated": {"id": song["id"]},
        }

    @app.delete("/api/gods/{god_id}")
    def delete_god(god_id: str):
        service.delete_god(god_id)
        return {"message": "God and all associated songs deleted successfully"}

    @app.delete("/api/songs/{song_id}")
    def delete_song(song_id: str):
        service.delete_song(song_id)
        return {"message": "Song deleted successfully"}

    @app.post("/api/preview-god")
    def preview_god(preview: GodPreview):
        name = (preview.name or "").strip()
        if not name:
            return {"id": "", "name": ""}
        return {"id": service.preview_god_id(name), "name": god_display_name(name)}

    @app.post("/api/preview-song")
    def preview_song(preview: SongPreview):
        return {"id": service.preview_song_id(preview.godId or "")}

    @app.post("/api/browse-file")
    def browse_file():
        home = Path.home()
        return {
            "suggestions": {
                "desktop": str(home / "Desktop"),
                "documents": str(home / "Documents"),
                "userHome": str(home),
            },
            "message": "Use these common paths as reference",
        }

    return app


def serve(config: Config, host: Optional[str] = None, port: Optional[int] = None):
    """Run the API with uvicorn until interrupted."""
    host = host or config.server.host
    port = port or config.server.port
    app = create_app(CatalogService(config))

    print("========================================")
    print("  Divine Blessing Admin Tool")
    print("========================================")
    print(f"  Server running at http://{host}:{port}")
    print(f"  Document: {config.document_path}")
    print(f"  Assets:   {config.assets_root}")
    print("  Press Ctrl+C to stop the server")
    print("========================================")
    uvicorn.run(app, host=host, port=port)


def main():
    parser = argparse.ArgumentParser(
        description="Divine Admin HTTP API: manage gods and songs from a browser",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.json (default: ./config.json)",
    )
    parser.add_argument("--host", type=str, default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Port (default: 3000)")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = Config.load(Path(args.config) if args.config else None)
    serve(config, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
