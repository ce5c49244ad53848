"""
Command-line entrypoint for moving artifacts in and out of a bucket.

Intended usage:

    artifact-driver save ./work runs/42/
    artifact-driver load runs/42/ /tmp/y
    artifact-driver ls runs/42/

The backend and its bucket are taken from environment variables (see
`artifact_drivers.factory`); a ".env" file in the working directory is
read first when present.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from oci.exceptions import ServiceError

from .base import Artifact, ArtifactDriver
from .env_loader import load_dotenv_if_present
from .errors import ArtifactDriverError
from .factory import SUPPORTED_DRIVERS, build_driver_from_env

# reported as "error: ..." with exit code 1 instead of a traceback
CLI_ERRORS = (
    ArtifactDriverError,
    RuntimeError,
    OSError,
    ServiceError,
    ClientError,
    BotoCoreError,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artifact-driver",
        description="Load, save and inspect workflow artifacts in object storage.",
    )
    parser.add_argument(
        "--driver",
        choices=SUPPORTED_DRIVERS,
        default=None,
        help="Backend to use (defaults to $ARTIFACT_DRIVER or oraclecloud).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    load = sub.add_parser("load", help="Download an artifact into a local directory.")
    load.add_argument("key")
    load.add_argument("dest")
    load.add_argument("--name", default="", help="Local file name when the key is a single object.")

    save = sub.add_parser("save", help="Upload a local file or directory under a key.")
    save.add_argument("src")
    save.add_argument("key")

    delete = sub.add_parser("delete", help="Delete every object under a key.")
    delete.add_argument("key")

    ls = sub.add_parser("ls", help="List object names under a key.")
    ls.add_argument("key")

    isdir = sub.add_parser("isdir", help="Print whether a key is a directory.")
    isdir.add_argument("key")

    cat = sub.add_parser("cat", help="Write a single object to stdout.")
    cat.add_argument("key")

    return parser


def _run(driver: ArtifactDriver, args: argparse.Namespace) -> None:
    if args.command == "load":
        driver.load(Artifact(key=args.key, name=args.name), args.dest)
        print(f"Loaded {args.key} into {args.dest}")
    elif args.command == "save":
        driver.save(args.src, Artifact(key=args.key))
        print(f"Saved {args.src} to {args.key}")
    elif args.command == "delete":
        driver.delete(Artifact(key=args.key))
        print(f"Deleted {args.key}")
    elif args.command == "ls":
        for name in driver.list_objects(Artifact(key=args.key)):
            print(name)
    elif args.command == "isdir":
        print("true" if driver.is_directory(Artifact(key=args.key)) else "false")
    elif args.command == "cat":
        stream = driver.open_stream(Artifact(key=args.key))
        try:
            shutil.copyfileobj(stream, sys.stdout.buffer)
        finally:
            stream.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv_if_present()

    try:
        driver = build_driver_from_env(args.driver)
        _run(driver, args)
    except CLI_ERRORS as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


__all__ = ["main"]
