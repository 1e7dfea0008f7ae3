"""Divine Admin command line.

Usage:
    divine-admin init --json ./assets/gods_songs.json --assets ./assets
    divine-admin configure --json /path/to/gods_songs.json --assets /path/to/assets
    divine-admin add-god Shiva --order 1 --image ~/shiva.png
    divine-admin add-song "Om Namah Shivaya" --god god_shiva --audio om.mp3
    divine-admin delete-song song_shiva_20241008153045
    divine-admin list
    divine-admin menu                         (interactive prompts)
    divine-admin serve --port 3000
    divine-admin --server http://127.0.0.1:3000 list

Files passed on the command line are copied into the assets folders; the
originals are left in place.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from divine_admin.catalog import catalog_summary, find_god
from divine_admin.client import AdminClient
from divine_admin.config import Config, configure, init_config
from divine_admin.errors import CatalogError
from divine_admin.service import LANGUAGES, CatalogService


def _config_path(args) -> Path:
    return Path(args.config) if args.config else Path("config.json")


def _backend(args, config: Config):
    if args.server:
        return AdminClient(base_url=args.server)
    return CatalogService(config)


def _source_kwargs(backend) -> dict:
    # Never delete the user's own files; only staged uploads are moved.
    if isinstance(backend, CatalogService):
        return {"keep_sources": True}
    return {}


def print_catalog(catalog: dict):
    summary = catalog_summary(catalog)
    gods = catalog["gods"]
    print(f"Version: {summary['version']}  ({summary['total_gods']} gods, {summary['total_songs']} songs)")
    if not gods:
        print("  (no gods)")
        return
    for god in gods:
        print(f"  [{god.get('displayOrder', 0)}] {god.get('name', '')}  ({god.get('id')})")
        for song in god.get("songs") or []:
            files = [song.get(k) for k in ("audioFileName", "lyricsTeluguFileName", "lyricsEnglishFileName")]
            files = ", ".join(f for f in files if f) or "no files"
            print(f"      [{song.get('displayOrder', 0)}] {song.get('title', '')}  ({song.get('id')}) - {files}")


def cmd_init(args, config: Config):
    config = init_config(args.json, args.assets, config_path=_config_path(args))
    print(f"JSON file: {config.document_path}")
    print(f"Assets:    {config.assets_root}")


def cmd_configure(args, config: Config):
    if args.server:
        with AdminClient(base_url=args.server) as client:
            result = client.set_config(args.json, args.assets)
        print(result["message"])
        return
    config = configure(config, json_path=args.json, assets_path=args.assets)
    config.save(_config_path(args))
    print("Configuration updated successfully!")
    print(f"JSON file: {config.json_path}")
    print(f"Assets:    {config.assets_path}")


def cmd_list(args, backend):
    print_catalog(backend.get_data())


def cmd_add_god(args, backend):
    god = backend.add_god(args.name, args.order, args.image, **_source_kwargs(backend))
    print(f'God "{god["name"]}" added with ID {god["id"]}')


def cmd_add_song(args, backend):
    song = backend.add_song(
        args.title,
        args.god,
        language_default=args.language,
        audio_path=args.audio,
        lyrics_telugu_path=args.lyrics_telugu,
        lyrics_english_path=args.lyrics_english,
        duration=args.duration,
        display_order=args.order,
        **_source_kwargs(backend),
    )
    print(f'Song "{song["title"]}" added with ID {song["id"]}')


def cmd_delete_god(args, backend):
    backend.delete_god(args.god_id)
    print(f"God {args.god_id} and all associated songs deleted")


def cmd_delete_song(args, backend):
    backend.delete_song(args.song_id)
    print(f"Song {args.song_id} deleted")


def cmd_preview_god(args, backend):
    print(backend.preview_god_id(args.name))


def cmd_preview_song(args, backend):
    print(backend.preview_song_id(args.god_id))


def _ask(prompt: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    value = input(f"{prompt}{suffix}: ").strip()
    return value or default


def _pick_god(catalog: dict):
    gods = catalog.get("gods", [])
    if not gods:
        print("No gods found. Please add a God first.")
        return None
    for i, god in enumerate(gods, 1):
        print(f"  {i}. {god.get('name')}  ({god.get('id')})")
    choice = _ask("Select God number")
    if choice.isdigit() and 1 <= int(choice) <= len(gods):
        return gods[int(choice) - 1]
    god = find_god(catalog, choice)
    if god is None:
        print("Invalid choice.")
    return god


def _menu_add_god(backend):
    name = _ask("God display name (\"Lord\" is added automatically)")
    if name:
        print(f"ID will be: {backend.preview_god_id(name)}")
    order = _ask("Display order", "1")
    image = _ask("Path to God image file (optional)")
    god = backend.add_god(name, order, image or None, **_source_kwargs(backend))
    print(f'God "{god["name"]}" added successfully!')


def _menu_add_song(backend):
    god = _pick_god(backend.get_data())
    if god is None:
        return
    title = _ask("Song title")
    language = _ask(f"Default language ({'/'.join(LANGUAGES)})", LANGUAGES[0])
    audio = _ask("Path to audio file (optional)")
    telugu = _ask("Path to Telugu lyrics file (.lrc or .txt, optional)")
    english = _ask("Path to English lyrics file (.lrc or .txt, optional)")
    duration = _ask("Duration in milliseconds", "0")
    order = _ask("Display order", "1")
    song = backend.add_song(
        title, god["id"], language_default=language,
        audio_path=audio or None, lyrics_telugu_path=telugu or None,
        lyrics_english_path=english or None, duration=duration,
        display_order=order, **_source_kwargs(backend),
    )
    print(f'Song "{song["title"]}" added successfully under God "{god["name"]}"')


def _menu_delete_god(backend):
    god = _pick_god(backend.get_data())
    if god is None:
        return
    count = len(god.get("songs") or [])
    confirm = _ask(f"Delete '{god['name']}' and its {count} songs? (y/n)").lower()
    if confirm == "y":
        backend.delete_god(god["id"])
        print("God and all associated songs deleted successfully!")


def _menu_delete_song(backend):
    song_id = _ask("Song ID to delete")
    if song_id:
        backend.delete_song(song_id)
        print("Song deleted successfully!")


MENU_ACTIONS = [
    ("List catalog", lambda backend: print_catalog(backend.get_data())),
    ("Add God", _menu_add_god),
    ("Add Song", _menu_add_song),
    ("Delete God", _menu_delete_god),
    ("Delete Song", _menu_delete_song),
]


def cmd_menu(args, backend):
    print("=== Divine Blessing Admin Tool ===")
    while True:
        print()
        for i, (label, _) in enumerate(MENU_ACTIONS, 1):
            print(f"  {i}. {label}")
        print("  0. Exit")
        choice = input("> ").strip()
        if choice in ("0", "q", "exit"):
            print("Goodbye!")
            return
        if not choice.isdigit() or not 1 <= int(choice) <= len(MENU_ACTIONS):
            print("Invalid choice.")
            continue
        try:
            MENU_ACTIONS[int(choice) - 1][1](backend)
        except CatalogError as e:
            print(f"Error: {e}")


def cmd_serve(args, config: Config):
    from divine_admin.server import serve

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    serve(config, host=args.host, port=args.port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="divine-admin",
        description="Divine Admin: curate the gods and songs catalog for the mobile app",
    )
    parser.add_argument("--config", type=str, default=None,
                        help="Path to config.json (default: ./config.json)")
    parser.add_argument("--server", type=str, default=None,
                        help="Talk to a running server at this URL instead of the local files")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", help="Create the JSON file and asset folders")
    p.add_argument("--json", type=str, default=None, help="Path to gods_songs.json")
    p.add_argument("--assets", type=str, default=None, help="Assets root folder")
    p.set_defaults(func=cmd_init, needs_backend=False)

    p = sub.add_parser("configure", help="Point at an existing JSON file and assets folder")
    p.add_argument("--json", type=str, default=None, help="Path to gods_songs.json")
    p.add_argument("--assets", type=str, default=None, help="Assets root folder")
    p.set_defaults(func=cmd_configure, needs_backend=False)

    p = sub.add_parser("list", help="Show all gods and songs")
    p.set_defaults(func=cmd_list, needs_backend=True)

    p = sub.add_parser("add-god", help="Add a god")
    p.add_argument("name", type=str, help="Display name, without the \"Lord\" prefix")
    p.add_argument("--order", type=int, default=0, help="Display order")
    p.add_argument("--image", type=str, default=None, help="Image file to copy")
    p.set_defaults(func=cmd_add_god, needs_backend=True)

    p = sub.add_parser("add-song", help="Add a song to a god")
    p.add_argument("title", type=str, help="Song title")
    p.add_argument("--god", type=str, required=True, help="God ID, e.g. god_shiva")
    p.add_argument("--language", type=str, default="telugu", choices=LANGUAGES,
                   help="Default lyrics language")
    p.add_argument("--audio", type=str, default=None, help="Audio file to copy")
    p.add_argument("--lyrics-telugu", type=str, default=None, help="Telugu lyrics file")
    p.add_argument("--lyrics-english", type=str, default=None, help="English lyrics file")
    p.add_argument("--duration", type=int, default=0, help="Duration in milliseconds")
    p.add_argument("--order", type=int, default=0, help="Display order")
    p.set_defaults(func=cmd_add_song, needs_backend=True)

    p = sub.add_parser("delete-god", help="Delete a god, its songs and their files")
    p.add_argument("god_id", type=str)
    p.set_defaults(func=cmd_delete_god, needs_backend=True)

    p = sub.add_parser("delete-song", help="Delete a song and its files")
    p.add_argument("song_id", type=str)
    p.set_defaults(func=cmd_delete_song, needs_backend=True)

    p = sub.add_parser("preview-god", help="Show the ID a new god would get")
    p.add_argument("name", type=str)
    p.set_defaults(func=cmd_preview_god, needs_backend=True)

    p = sub.add_parser("preview-song", help="Show the ID a new song would get")
    p.add_argument("god_id", type=str)
    p.set_defaults(func=cmd_preview_song, needs_backend=True)

    p = sub.add_parser("menu", help="Interactive prompts")
    p.set_defaults(func=cmd_menu, needs_backend=True)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", type=str, default=None, help="Bind address")
    p.add_argument("--port", type=int, default=None, help="Port (default: 3000)")
    p.set_defaults(func=cmd_serve, needs_backend=False)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = Config.load(_config_path(args))
    except json.JSONDecodeError as e:
        print(f"Error: {_config_path(args)} is not valid JSON: {e}", file=sys.stderr)
        return 1

    try:
        if args.needs_backend:
            backend = _backend(args, config)
            try:
                args.func(args, backend)
            finally:
                if isinstance(backend, AdminClient):
                    backend.close()
        else:
            args.func(args, config)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (EOFError, KeyboardInterrupt):
        print("\nAborted.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
