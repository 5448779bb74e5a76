"""
Command-line entrypoint for the LinkedIn Ads asset tooling.

Commands:
    image upload   --owner URN --file FILE|URL|S3 [--recipe URN]
    video upload   --owner URN --file FILE|URL|S3 [--recipe URN] [--wait]
    raw            METHOD PATH [--query JSON] [--body JSON] [--headers JSON] [--all]
    s3 presign     get|put s3://bucket/key [--expires N] [--content-type MIME]

JSON results go to stdout; errors go to stderr as a structured error object
and the process exits 1.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from shared_utils.config_loader import ObjectStoreSettings, Settings
from shared_utils.constants import AssetRecipes, Defaults, LogScope, TunnelMode
from shared_utils.di_container import get_di_container
from shared_utils.error_handler import AppException, ConfigurationError, ValidationError, handle_error
from shared_utils.http_utils import json_object_to_string_map
from shared_utils.logging_utils import configure_logging
from shared_utils.validation import InputValidator


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _global_options() -> argparse.ArgumentParser:
    """Options accepted before or after the subcommand."""
    common = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
    common.add_argument("--access-token", metavar="TOKEN", help="Access token (env: LINKEDIN_ACCESS_TOKEN)")
    common.add_argument("--linkedin-version", metavar="YYYYMM", help="LinkedIn API version header (env: LINKEDIN_VERSION)")
    common.add_argument("--base-url", metavar="URL", help="API base URL (env: LINKEDIN_BASE_URL)")
    common.add_argument(
        "--restli-protocol-version",
        metavar="VERSION",
        help="Rest.li protocol version (env: LINKEDIN_RESTLI_PROTOCOL_VERSION)",
    )
    common.add_argument(
        "--tunnel",
        choices=[m.value for m in TunnelMode],
        help="Query tunneling mode for long GETs (default: auto)",
    )
    common.add_argument("--timeout", type=float, metavar="SECONDS", help="HTTP timeout in seconds")
    common.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    common.add_argument("--debug", action="store_true", help="Enable debug logging")
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _global_options()
    parser = argparse.ArgumentParser(
        prog="linkedin-ads",
        description="LinkedIn Marketing API CLI (Rest.li /rest)",
        parents=[common],
    )
    commands = parser.add_subparsers(dest="command", required=True)

    image = commands.add_parser("image", help="Image helpers (Assets API)")
    image_ops = image.add_subparsers(dest="op", required=True)
    image_upload = image_ops.add_parser("upload", parents=[common], help="Register and upload an image")
    image_upload.add_argument("--owner", required=True, metavar="URN")
    image_upload.add_argument("--file", required=True, metavar="FILE|URL|S3")
    image_upload.add_argument("--recipe", default=AssetRecipes.IMAGE, metavar="URN")
    image_upload.set_defaults(handler=_handle_image_upload)

    video = commands.add_parser("video", help="Video helpers (Assets API)")
    video_ops = video.add_subparsers(dest="op", required=True)
    video_upload = video_ops.add_parser("upload", parents=[common], help="Register and upload a video")
    video_upload.add_argument("--owner", required=True, metavar="URN")
    video_upload.add_argument("--file", required=True, metavar="FILE|URL|S3")
    video_upload.add_argument("--recipe", default=AssetRecipes.VIDEO, metavar="URN")
    video_upload.add_argument("--wait", action="store_true", help="Wait for processing (polls /assets/{id})")
    video_upload.add_argument(
        "--wait-timeout",
        type=float,
        default=Defaults.POLL_TIMEOUT_SECONDS,
        metavar="SECONDS",
        help="Give up waiting after this many seconds",
    )
    video_upload.set_defaults(handler=_handle_video_upload)

    raw = commands.add_parser("raw", parents=[common], help="Make a raw LinkedIn REST call")
    raw.add_argument("method")
    raw.add_argument("path")
    raw.add_argument("--query", metavar="JSON", help="JSON object of query params")
    raw.add_argument("--body", metavar="JSON", help="JSON body")
    raw.add_argument("--headers", metavar="JSON", help="JSON object of headers")
    raw.add_argument("--all", action="store_true", help="Auto-paginate (follows paging.links rel=next)")
    raw.add_argument("--max-pages", type=int, default=0, metavar="N", help="Max pages to fetch with --all")
    raw.add_argument("--max-items", type=int, default=0, metavar="N", help="Max items to fetch with --all")
    raw.add_argument("--unwrap", action="store_true", help="Print only the unwrapped body")
    raw.set_defaults(handler=_handle_raw)

    s3 = commands.add_parser("s3", help="S3 helpers")
    s3_ops = s3.add_subparsers(dest="op", required=True)
    presign = s3_ops.add_parser("presign", help="Presign an s3:// URL")
    presign_ops = presign.add_subparsers(dest="presign_op", required=True)
    for name in ("get", "put"):
        sub = presign_ops.add_parser(name, parents=[common])
        sub.add_argument("url", metavar="S3_URL")
        sub.add_argument("--expires", type=int, default=Defaults.PRESIGN_EXPIRES_SECONDS, metavar="SECONDS")
        if name == "put":
            sub.add_argument("--content-type", metavar="MIME")
        sub.set_defaults(handler=_handle_s3_presign)

    return parser


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

_SETTINGS_FLAGS = {
    "access_token": "access_token",
    "linkedin_version": "version",
    "base_url": "base_url",
    "restli_protocol_version": "restli_protocol_version",
    "tunnel": "tunnel_mode",
    "timeout": "timeout",
}


def load_settings(args: argparse.Namespace) -> Settings:
    """Flags override LINKEDIN_* environment variables."""
    overrides: Dict[str, Any] = {}
    for flag, field in _SETTINGS_FLAGS.items():
        value = getattr(args, flag, None)
        if value is not None:
            overrides[field] = value
    try:
        return Settings(**overrides)
    except PydanticValidationError as exc:
        fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        if "access_token" in fields:
            raise ConfigurationError("LINKEDIN_ACCESS_TOKEN missing", context={"fields": fields}) from exc
        raise ConfigurationError(f"invalid configuration: {exc}", context={"fields": fields}) from exc


def _configure(args: argparse.Namespace) -> None:
    container = get_di_container()
    container.use_settings(load_settings(args))


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _handle_image_upload(args: argparse.Namespace) -> Any:
    _configure(args)
    container = get_di_container()
    file = container.get_file_source().resolve(args.file)
    try:
        return container.get_asset_upload_service().upload_image(
            owner=args.owner, file=file, recipe=args.recipe
        )
    finally:
        file.cleanup()


def _handle_video_upload(args: argparse.Namespace) -> Any:
    _configure(args)
    container = get_di_container()
    file = container.get_file_source().resolve(args.file)
    try:
        return container.get_asset_upload_service().upload_video(
            owner=args.owner,
            file=file,
            recipe=args.recipe,
            wait=args.wait,
            wait_timeout=args.wait_timeout,
        )
    finally:
        file.cleanup()


def _handle_raw(args: argparse.Namespace) -> Any:
    from services.pagination import paginate_all, unwrap_body

    query = json_object_to_string_map(args.query, "--query") if args.query else {}
    headers = json_object_to_string_map(args.headers, "--headers") if args.headers else {}
    body = None
    if args.body:
        try:
            body = json.loads(args.body)
        except ValueError as exc:
            raise ValidationError("invalid JSON for --body", context={"flag": "--body"}) from exc
    InputValidator.validate_positive_int(args.max_pages, "--max-pages", allow_zero=True)
    InputValidator.validate_positive_int(args.max_items, "--max-items", allow_zero=True)

    _configure(args)
    client = get_di_container().get_rest_client()
    if args.all:
        response = paginate_all(
            client, args.method, args.path, query, headers, body,
            max_pages=args.max_pages, max_items=args.max_items,
        )
    else:
        response = client.call(args.method, args.path, query=query, headers=headers, body=body)

    if args.unwrap:
        return unwrap_body(response.body, response.headers)
    return response.model_dump()


def _handle_s3_presign(args: argparse.Namespace) -> Any:
    from adapters.s3_object_store import S3ObjectStoreAdapter

    InputValidator.validate_positive_int(args.expires, "--expires")
    storage = ObjectStoreSettings()
    store = S3ObjectStoreAdapter(region=storage.aws_region, endpoint_url=storage.aws_endpoint_url)
    if args.presign_op == "get":
        return store.presign_get(args.url, args.expires)
    return store.presign_put(args.url, args.expires, getattr(args, "content_type", None))


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def write_output(value: Any, pretty: bool) -> None:
    if isinstance(value, str):
        text = value
    elif pretty:
        text = json.dumps(value, indent=2)
    else:
        text = json.dumps(value, separators=(",", ":"))
    sys.stdout.write(text + "\n")
    sys.stdout.flush()


def main(argv: Optional[List[str]] = None) -> int:
    """CLI main — parse args, run the command, print the result."""
    args = build_parser().parse_args(argv)
    configure_logging(
        environment=os.environ.get("LINKEDIN_ENVIRONMENT", "production").lower(),
        debug=getattr(args, "debug", False),
    )

    try:
        result = args.handler(args)
    except AppException as exc:
        # reported once, as the JSON error below
        print(json.dumps(exc.to_dict()), file=sys.stderr)
        return 1
    except Exception as exc:
        print(json.dumps(handle_error(exc, scope=LogScope.CLI)), file=sys.stderr)
        return 1

    try:
        write_output(result, getattr(args, "pretty", False))
    except BrokenPipeError:
        return 0
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
