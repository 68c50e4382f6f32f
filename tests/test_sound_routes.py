"""Tests for sound asset routes."""

import pytest

from backoffice.config import settings


@pytest.fixture
def sounds_dir(tmp_path, monkeypatch):
    directory = tmp_path / "sounds"
    directory.mkdir()
    (directory / "alarm_clock.mp3").write_bytes(b"ID3fake")
    monkeypatch.setattr(settings, "sounds_dir", str(directory))
    return directory


@pytest.mark.asyncio
async def test_check_sounds_lists_files(client, sounds_dir):
    response = await client.get("/api/check-sounds")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert [f["name"] for f in data["files"]] == ["alarm_clock.mp3"]
    assert data["files"][0]["size"] == 7


@pytest.mark.asyncio
async def test_check_sounds_missing_directory(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "sounds_dir", str(tmp_path / "absent"))
    response = await client.get("/api/check-sounds")
    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_serve_sound(client, sounds_dir):
    response = await client.get("/api/sound/alarm_clock.mp3")
    assert response.status_code == 200
    assert response.content == b"ID3fake"
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.headers["cache-control"] == "public, max-age=86400"


@pytest.mark.asyncio
async def test_unknown_sound_is_404(client, sounds_dir):
    response = await client.get("/api/sound/siren.mp3")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_path_outside_sounds_dir_refused(client, sounds_dir):
    (sounds_dir.parent / "secret.txt").write_text("nope")
    response = await client.get("/api/sound/..%2Fsecret.txt")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_primary_sound_url_is_served(client, sounds_dir, sound):
    response = await client.get(sound.primary_url)
    assert response.status_code == 200
    assert response.content == b"ID3fake"
    assert response.headers["content-type"] == "audio/mpeg"


@pytest.mark.asyncio
async def test_primary_sound_url_unknown_file(client, sounds_dir):
    response = await client.get("/sounds/siren.mp3")
    assert response.status_code == 404
