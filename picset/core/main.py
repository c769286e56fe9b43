import argparse
import mimetypes
import os
import sys
from typing import Any

from dotenv import load_dotenv

from ._async_helper import run_sync
from ._loader import Loader
from ._log_helper import configure_logging
from .exceptions import BaseError
from .manifest import MANIFEST_FILE

DEFAULT_HANDLE = "pipeline"


def load_pipeline(
    path: str,
    manifest: str,
    handle: str,
    tag: str | None,
) -> Any:
    env_file = os.path.join(path, ".env")
    if os.path.isfile(env_file):
        load_dotenv(env_file)
    loader = Loader(path=path, manifest=manifest)
    return loader.load_component(handle=handle, tag=tag)


def ingest(
    path: str,
    manifest: str,
    handle: str,
    tag: str | None,
    file: str,
    media_type: str | None,
    uploader: str,
    event: str | None,
) -> Any:
    """
    picset Ingest
    """
    pipeline = load_pipeline(path, manifest, handle, tag)
    with open(file, "rb") as f:
        content = f.read()
    return pipeline.ingest(
        content=content,
        media_type=media_type or guess_media_type(file),
        uploader_id=uploader,
        association_id=event,
    )


async def aingest(
    path: str,
    manifest: str,
    handle: str,
    tag: str | None,
    file: str,
    media_type: str | None,
    uploader: str,
    event: str | None,
) -> Any:
    """
    picset Ingest Async
    """
    pipeline = load_pipeline(path, manifest, handle, tag)
    with open(file, "rb") as f:
        content = f.read()
    return await pipeline.aingest(
        content=content,
        media_type=media_type or guess_media_type(file),
        uploader_id=uploader,
        association_id=event,
    )


def get(
    path: str,
    manifest: str,
    handle: str,
    tag: str | None,
    id: str,
) -> Any:
    """
    picset Get
    """
    pipeline = load_pipeline(path, manifest, handle, tag)
    return pipeline.get(id=id)


def guess_media_type(file: str) -> str:
    media_type, _ = mimetypes.guess_type(file)
    return media_type or "application/octet-stream"


def main():
    parser = argparse.ArgumentParser(
        prog="picset", description="picset image pipeline CLI"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO", help="Log level"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    ingest_parser = subparsers.add_parser(
        "ingest", help="Ingest an image and store its variants"
    )
    get_parser = subparsers.add_parser("get", help="Get an image record")
    common_arguments = [
        ("--handle", str, DEFAULT_HANDLE, "Pipeline component handle"),
        ("--tag", str, None, "Binding tag"),
        ("--path", str, ".", "Project directory"),
        ("--manifest", str, MANIFEST_FILE, "Manifest filename"),
    ]
    ingest_arguments = [
        ("file", str, None, "Image file"),
        ("--media-type", str, None, "Declared media type"),
        ("--uploader", str, None, "Uploader id"),
        ("--event", str, None, "Event id the image belongs to"),
    ]
    for arg in ingest_arguments + common_arguments:
        ingest_parser.add_argument(
            arg[0], type=arg[1], default=arg[2], help=arg[3]
        )
    ingest_parser.add_argument(
        "--async", dest="use_async", action="store_true", help="Run async"
    )
    get_parser.add_argument("id", type=str, help="Image record id")
    for arg in common_arguments:
        get_parser.add_argument(
            arg[0], type=arg[1], default=arg[2], help=arg[3]
        )

    args = parser.parse_args()
    configure_logging(args.log_level)
    try:
        if args.command == "ingest":
            if args.uploader is None:
                parser.error("--uploader is required")
            ingest_args = dict(
                path=args.path,
                manifest=args.manifest,
                handle=args.handle,
                tag=args.tag,
                file=args.file,
                media_type=args.media_type,
                uploader=args.uploader,
                event=args.event,
            )
            if args.use_async:
                response = run_sync(aingest, **ingest_args)
            else:
                response = ingest(**ingest_args)
        elif args.command == "get":
            response = get(
                path=args.path,
                manifest=args.manifest,
                handle=args.handle,
                tag=args.tag,
                id=args.id,
            )
        else:
            parser.print_help()
            return
    except BaseError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(0)
    print(response.result.to_json(indent=2, by_alias=True))


if __name__ == "__main__":
    main()
