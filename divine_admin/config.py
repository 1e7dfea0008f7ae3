"""Divine Admin configuration management.

Handles loading, validating, and creating config.json which stores:
- Document location (gods_songs.json read by the mobile app)
- Assets root (images/, audio/, lyrics/telugu/, lyrics/english/)
- Upload staging folder and server settings

A Config value is passed explicitly to the service; nothing here is global.
"""

import json
from dataclasses import dataclass, field, asdict, replace
from pathlib import Path
from typing import Optional

from divine_admin.assets import category_dir, ensure_category_dirs
from divine_admin.catalog import create_catalog, parse_catalog
from divine_admin.errors import DocumentNotFoundError, MalformedDocumentError, ValidationError
from divine_admin.paths import normalize_path


DEFAULT_CONFIG_PATH = Path("config.json")

DEFAULT_JSON_PATH = "assets/gods_songs.json"
DEFAULT_ASSETS_PATH = "assets"
DEFAULT_UPLOADS_DIR = "uploads"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


@dataclass
class ServerSettings:
    """HTTP server settings."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass
class Config:
    json_path: str = DEFAULT_JSON_PATH
    assets_path: str = DEFAULT_ASSETS_PATH
    uploads_dir: str = DEFAULT_UPLOADS_DIR
    server: ServerSettings = field(default_factory=ServerSettings)
    version: str = "1.0"

    @property
    def document_path(self) -> Path:
        return Path(self.json_path).resolve()

    @property
    def assets_root(self) -> Path:
        return Path(self.assets_path).resolve()

    @property
    def uploads_path(self) -> Path:
        return Path(self.uploads_dir).resolve()

    def asset_dir(self, category: str) -> Path:
        return category_dir(self.assets_root, category)

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: Optional[Path] = None):
        path = Path(path or DEFAULT_CONFIG_PATH)
        path.write_text(json.dumps(self.to_dict(), indent=2) + "\n")

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        # "android_project_path" is the legacy name of the assets root
        assets_path = data.get("assets_path", data.get("android_project_path", DEFAULT_ASSETS_PATH))
        return cls(
            json_path=data.get("json_path", DEFAULT_JSON_PATH),
            assets_path=assets_path,
            uploads_dir=data.get("uploads_dir", DEFAULT_UPLOADS_DIR),
            server=ServerSettings(**data.get("server", {})),
            version=data.get("version", "1.0"),
        )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        path = Path(path or DEFAULT_CONFIG_PATH)
        if not path.exists():
            return cls()
        data = json.loads(path.read_text())
        return cls.from_dict(data)


def configure(config: Config, json_path: Optional[str] = None,
              assets_path: Optional[str] = None) -> Config:
    """Validate new document/assets locations and return an updated Config.

    Empty candidates fall back to the defaults. Nothing is created: the JSON
    file must exist and hold valid JSON, and the assets folder must exist.
    """
    document = normalize_path(json_path) or Path(DEFAULT_JSON_PATH).resolve()
    assets = normalize_path(assets_path) or Path(DEFAULT_ASSETS_PATH).resolve()

    if not document.is_file():
        raise DocumentNotFoundError(
            f'JSON file not found at: "{document}". '
            "Please ensure the file exists or use a different path."
        )
    if not assets.is_dir():
        raise DocumentNotFoundError(
            f'Assets directory not found at: "{assets}". '
            "Please ensure the directory exists or use a different path."
        )

    try:
        text = document.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedDocumentError(f'JSON file is not valid UTF-8: "{document}"') from e
    if not text.strip():
        raise ValidationError(
            f'JSON file is empty: "{document}". '
            'The file should contain at least: {"version": "20241008000000", "gods": []}'
        )
    parse_catalog(text)

    return replace(config, json_path=str(document), assets_path=str(assets))


def init_config(json_path: Optional[str] = None, assets_path: Optional[str] = None,
                config_path: Optional[Path] = None) -> Config:
    """Load existing config or create a fresh one, ensure the document and folders exist."""
    config_path = Path(config_path or DEFAULT_CONFIG_PATH)
    config = Config.load(config_path)

    document = normalize_path(json_path)
    assets = normalize_path(assets_path)
    if document is not None:
        config = replace(config, json_path=str(document))
    if assets is not None:
        config = replace(config, assets_path=str(assets))

    ensure_category_dirs(config.assets_root)
    config.uploads_path.mkdir(parents=True, exist_ok=True)

    document = config.document_path
    if not document.exists() or not document.read_text(encoding="utf-8").strip():
        document.parent.mkdir(parents=True, exist_ok=True)
        document.write_text(json.dumps(create_catalog(), indent=2) + "\n", encoding="utf-8")

    config.save(config_path)
    return config
