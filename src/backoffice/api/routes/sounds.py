"""Alert sound asset routes."""

from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse, JSONResponse

from backoffice.config import settings
from backoffice.errors.exceptions import NotFoundError

router = APIRouter(tags=["Sounds"])

# Mounted at the site root, where pages load the alert cue from
public_router = APIRouter(tags=["Sounds"])


def _sounds_dir() -> Path:
    return Path(settings.sounds_dir)


@router.get("/check-sounds")
async def check_sounds():
    """List the sound files the dashboard can play."""
    sounds_dir = _sounds_dir()
    if not sounds_dir.is_dir():
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "message": "Sounds directory does not exist",
                "soundsDir": str(sounds_dir),
            },
        )

    files = []
    for path in sorted(sounds_dir.iterdir()):
        if not path.is_file():
            continue
        stat = path.stat()
        files.append({
            "name": path.name,
            "size": stat.st_size,
            "modified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
        })
    return {
        "success": True,
        "message": "Sounds directory accessible",
        "soundsDir": str(sounds_dir),
        "files": files,
    }


def _serve(filename: str) -> FileResponse:
    # Only plain file names inside the sounds directory are served
    name = Path(filename).name
    path = _sounds_dir() / name
    if not name or name != filename or not path.is_file():
        raise NotFoundError("Sound file", filename)
    return FileResponse(
        path,
        media_type="audio/mpeg",
        filename=name,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Cache-Control": "public, max-age=86400",
        },
    )


@router.get("/sound/{filename}")
async def get_sound(filename: str):
    return _serve(filename)


@public_router.get("/sounds/{filename}", include_in_schema=False)
async def get_public_sound(filename: str):
    return _serve(filename)
