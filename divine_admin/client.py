"""HTTP client for a running Divine Admin server.

Mirrors the CatalogService methods so the CLI can work against a remote
server. Error responses are turned back into the matching CatalogError
subclass using the ``kind`` field of the response body.
"""

from contextlib import ExitStack
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from divine_admin.errors import CatalogError, SourceNotFoundError, error_for_kind

DEFAULT_BASE_URL = "http://127.0.0.1:3000"


class AdminClient:
    """Thin wrapper over the /api endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(base_url=self.base_url, timeout=self.timeout)
        return self._client

    def _request(self, method: str, path: str, **kwargs) -> dict:
        response = self.http.request(method, path, **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") or body.get("detail") or response.text
            if "kind" not in body:
                raise CatalogError(f"HTTP {response.status_code}: {message}")
            raise error_for_kind(body["kind"], str(message))
        return response.json()

    def get_config(self) -> dict:
        return self._request("GET", "/api/config")

    def set_config(self, json_path: Optional[str] = None, assets_path: Optional[str] = None) -> dict:
        return self._request(
            "POST", "/api/config", json={"jsonPath": json_path, "assetsPath": assets_path}
        )

    def get_data(self) -> dict:
        return self._request("GET", "/api/data")

    def add_god(self, name: str, display_order=0, image_path=None) -> dict:
        """Upload a new god. Returns the created record."""
        with ExitStack() as stack:
            files = _open_files(stack, {"image": image_path})
            result = self._request(
                "POST",
                "/api/gods",
                data={"name": name, "displayOrder": str(display_order)},
                files=files or None,
            )
        return result["god"]

    def add_song(self, title: str, god_id: str, language_default: Optional[str] = None,
                 audio_path=None, lyrics_telugu_path=None, lyrics_english_path=None,
                 duration=0, display_order=0) -> dict:
        """Upload a new song. Returns the created record."""
        with ExitStack() as stack:
            files = _open_files(stack, {
                "audio": audio_path,
                "lyricsTeluguFile": lyrics_telugu_path,
                "lyricsEnglishFile": lyrics_english_path,
            })
            result = self._request(
                "POST",
                "/api/songs",
                data={
                    "title": title,
                    "godId": god_id,
                    "languageDefault": language_default or "",
                    "duration": str(duration),
                    "displayOrder": str(display_order),
                },
                files=files or None,
            )
        return result["song"]

    def delete_god(self, god_id: str) -> dict:
        return self._request("DELETE", f"/api/gods/{quote(god_id, safe='')}")

    def delete_song(self, song_id: str) -> dict:
        return self._request("DELETE", f"/api/songs/{quote(song_id, safe='')}")

    def preview_god_id(self, name: str) -> str:
        return self._request("POST", "/api/preview-god", json={"name": name})["id"]

    def preview_song_id(self, god_id: str) -> str:
        return self._request("POST", "/api/preview-song", json={"godId": god_id})["id"]

    def close(self):
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    @classmethod
    def from_config(cls, config) -> "AdminClient":
        """Create a client for the server described by a Config."""
        return cls(base_url=f"http://{config.server.host}:{config.server.port}")


def _open_files(stack: ExitStack, paths: dict) -> dict:
    files = {}
    for field, path in paths.items():
        if not path:
            continue
        path = Path(path)
        if not path.is_file():
            raise SourceNotFoundError(f"Source file not found: {path}")
        files[field] = (path.name, stack.enter_context(path.open("rb")))
    return files
