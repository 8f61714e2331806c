"""Command-line interface for gyazo."""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

from rich.console import Console

from . import __version__
from .client import GyazoClient
from .config import Config, Credentials
from .exceptions import GyazoError
from .models import Upload

console = Console(stderr=True)


def _json_string(value: Any, pretty: bool) -> str:
    if pretty:
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, ensure_ascii=False)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="gyazo",
        description="Upload, list and download files on Gyazo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gyazo upload shot.png             Upload an image, print its URL
  gyazo upload clip.mp4             Upload a video (needs a device ID)
  gyazo list --pretty               List all files (needs an API key)
  gyazo download 8980c52421e452ac   Download a file by ID

Credentials are read from ~/.config/gyazo.toml, the GYAZO_COOKIE,
GYAZO_DEVICE and GYAZO_KEY environment variables, or the options below.
        """,
    )

    cookie = parser.add_mutually_exclusive_group()
    cookie.add_argument(
        "--cookie",
        default=os.environ.get("GYAZO_COOKIE"),
        metavar="VALUE",
        help="Gyazo_session cookie, giving access to internal APIs",
    )
    cookie.add_argument("--no-cookie", action="store_true", help="Do not use a cookie")

    device = parser.add_mutually_exclusive_group()
    device.add_argument(
        "-d",
        "--device",
        default=os.environ.get("GYAZO_DEVICE"),
        metavar="ID",
        help='Identifier for the device, also known as "Gyazo ID"',
    )
    device.add_argument("--no-device", action="store_true", help="Do not use a device ID")

    key = parser.add_mutually_exclusive_group()
    key.add_argument(
        "-k",
        "--key",
        default=os.environ.get("GYAZO_KEY"),
        metavar="TOKEN",
        help='API key, also known as "access token"',
    )
    key.add_argument("--no-key", action="store_true", help="Do not use an API key")

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Minimal output (errors only)",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    commands.add_parser("count", help="Print the number of stored files")
    commands.add_parser("me", help="Print information about the account")

    get = commands.add_parser("get", aliases=["file", "info"], help="Print file information")
    get.add_argument("id", help="File ID")

    list_ = commands.add_parser("list", aliases=["ls"], help="List all stored files")
    list_.add_argument(
        "--internal",
        action="store_true",
        help="Use the internal API (requires --cookie)",
    )
    list_.add_argument("--pretty", action="store_true", help="Indent JSON output")

    upload = commands.add_parser("upload", aliases=["up"], help="Upload an image or MP4 video")
    upload.add_argument("file", type=Path, help="File to upload")
    upload.add_argument(
        "--api",
        action="store_true",
        help="Upload images through the official API (requires --key)",
    )
    upload.add_argument(
        "-a",
        "--anonymous",
        "--anon",
        action="store_true",
        help="Do not send the device ID",
    )
    upload.add_argument("--app", default=None, help="Application to attribute the upload to")
    visibility = upload.add_mutually_exclusive_group()
    visibility.add_argument(
        "--public-metadata",
        action="store_const",
        const=True,
        dest="public_metadata",
        help="Show upload metadata to everyone",
    )
    visibility.add_argument(
        "--private-metadata",
        action="store_const",
        const=False,
        dest="public_metadata",
        help="Show upload metadata only to the owner",
    )

    download = commands.add_parser("download", aliases=["down", "dl"], help="Download a file")
    download.add_argument("id", help="File ID")
    download.add_argument(
        "--to",
        type=Path,
        default=None,
        metavar="PATH",
        help="Destination (default: <id>.<type> in the current directory)",
    )
    download.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite the destination if it exists",
    )

    config = commands.add_parser("config", help="Print the effective configuration")
    config.add_argument(
        "--init",
        action="store_true",
        help="Create default config file at ~/.config/gyazo.toml",
    )
    commands.add_parser("config-path", help="Print the config file location")

    return parser


def run_count(client: GyazoClient, args: argparse.Namespace) -> None:
    print(client.count())


def run_me(client: GyazoClient, args: argparse.Namespace) -> None:
    print(_json_string(client.me().to_dict(), pretty=True))


def run_get(client: GyazoClient, args: argparse.Namespace) -> None:
    print(_json_string(client.get(args.id).to_dict(), pretty=True))


def run_list(client: GyazoClient, args: argparse.Namespace) -> None:
    if args.internal:
        for value in client.list_internal():
            print(_json_string(value, args.pretty))
    else:
        for file in client.list():
            print(_json_string(file.to_dict(), args.pretty))


def run_upload(client: GyazoClient, args: argparse.Namespace, config: Config) -> None:
    path: Path = args.file

    if path.suffix.lower() == ".mp4":
        url = client.upload_video(path)
        print(f"URL: {url}")
        return

    upload = Upload.from_config(config).with_overrides(
        app=args.app,
        public_metadata=args.public_metadata,
        anonymous=args.anonymous or None,
    )
    if args.api:
        file = client.upload_image_api(path, upload)
        print(f"URL: {file.permalink}")
        return

    result = client.upload_image_cgi(path, upload)
    if result.device != client.credentials.device and not args.quiet:
        console.print(
            f"[dim]Server assigned device ID {result.device}; "
            f"add it to {Config.get_config_path()} to keep uploads together[/dim]"
        )
    print(f"Device: {result.device}")
    print(f"URL: {result.url}")


def run_download(client: GyazoClient, args: argparse.Namespace) -> None:
    file = client.get(args.id)
    path: Path = args.to or Path(file.name)
    if not args.quiet:
        console.print(f"File: {path}", style="dim", markup=False)
    size = client.download(file, path, force=args.force)
    if not args.quiet:
        console.print(f"[green]Size: {size} bytes[/green]")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code (0 for success, 1 for errors)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "config-path":
        print(Config.get_config_path())
        return 0

    if args.command == "config" and args.init:
        config_path = Config.get_config_path()
        if config_path.exists():
            console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
        else:
            Config.create_default_config()
            console.print(f"[green]Created config: {config_path}[/green]")
        return 0

    # Resolve settings: CLI args > environment > config
    config = Config.load()
    credentials = Credentials.resolve(
        config,
        cookie=args.cookie,
        device=args.device,
        key=args.key,
        no_cookie=args.no_cookie,
        no_device=args.no_device,
        no_key=args.no_key,
    )

    if args.command == "config":
        config.cookie = credentials.cookie
        config.device = credentials.device
        config.key = credentials.key
        print(config.to_toml(), end="")
        return 0

    commands = {
        "count": run_count,
        "me": run_me,
        "get": run_get,
        "file": run_get,
        "info": run_get,
        "list": run_list,
        "ls": run_list,
        "download": run_download,
        "down": run_download,
        "dl": run_download,
    }

    try:
        with GyazoClient(credentials, quiet=args.quiet) as client:
            if args.command in ("upload", "up"):
                run_upload(client, args, config)
            else:
                commands[args.command](client, args)
    except GyazoError as e:
        console.print(f"Error: {e}", style="red", markup=False)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
