# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Inspect and edit stored elements, and work with class
#   descriptions, from the shell. The storage backend comes
#   from configuration (ELEMENTSTORE_BACKEND, see config.py).
#
# COMMANDS:
# ---------
# 1. Refresh-and-read an element:
#    python -m elementstore.cli get candidate_alice
#
# 2. Merge-and-save a JSON patch:
#    python -m elementstore.cli set candidate_alice '{"votes": 4}'
#
#    get and set need a persistent backend (mongo or mysql). The memory
#    backend lives only as long as one command, so they refuse it.
#
# 3. Describe a class (optionally save it under METADATA_DIR):
#    python -m elementstore.cli describe elementstore.voting:VotingCandidate --save
#
# 4. Print skeleton source from a saved description:
#    python -m elementstore.cli scaffold metadata/VotingCandidate.json --name Candidate
#
# ==============================================

import argparse
import asyncio
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from elementstore.config import AppConfig, get_config
from elementstore.element import Element
from elementstore.errors import ElementStoreError
from elementstore.metadata import decode_description, encode_description, synthesize_type
from elementstore.persistence import MetadataStore
from elementstore.storage import create_store

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elementstore",
        description="Read and write store-backed elements and class descriptions.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Print the stored state of an element")
    get_parser.add_argument("identifier")

    set_parser = subparsers.add_parser("set", help="Merge a JSON object into an element's state")
    set_parser.add_argument("identifier")
    set_parser.add_argument("patch", help="JSON object, e.g. '{\"votes\": 1}'")

    describe_parser = subparsers.add_parser("describe", help="Print a class description")
    describe_parser.add_argument("target", help="module.path:ClassName")
    describe_parser.add_argument("--save", action="store_true", help="Also save it under METADATA_DIR")

    scaffold_parser = subparsers.add_parser("scaffold", help="Print skeleton source for a description file")
    scaffold_parser.add_argument("file", type=Path)
    scaffold_parser.add_argument("--name", help="Class name to generate (default: the described name)")

    return parser


def load_class(target: str) -> type:
    """Import "module.path:ClassName" and return the class."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise ValueError(f"Expected module.path:ClassName, got {target!r}")
    module = importlib.import_module(module_name)
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        raise ValueError(f"{target!r} does not name a class")
    return cls


async def _get(config: AppConfig, identifier: str) -> dict:
    async with create_store(config) as store:
        return await Element(identifier, store=store).refresh_and_get()


async def _set(config: AppConfig, identifier: str, patch: dict) -> dict:
    async with create_store(config) as store:
        element = Element(identifier, store=store)
        await element.refresh_and_get()
        await element.merge_and_save(patch)
        return element.to_plain_value()


def _require_persistent_backend(config: AppConfig, command: str) -> None:
    if config.backend == "memory":
        raise ValueError(
            f"'{command}' needs a persistent backend; set ELEMENTSTORE_BACKEND to mongo or mysql"
        )


def run(args: argparse.Namespace, config: AppConfig) -> None:
    if args.command in ("get", "set"):
        _require_persistent_backend(config, args.command)

    if args.command == "get":
        state = asyncio.run(_get(config, args.identifier))
        print(json.dumps(state, indent=2))

    elif args.command == "set":
        patch = json.loads(args.patch)
        if not isinstance(patch, dict):
            raise ValueError("Patch must be a JSON object")
        state = asyncio.run(_set(config, args.identifier, patch))
        print(json.dumps(state, indent=2))

    elif args.command == "describe":
        cls = load_class(args.target)
        print(encode_description(cls))
        if args.save:
            MetadataStore(config.metadata_dir).save_description(cls)

    elif args.command == "scaffold":
        description = decode_description(args.file.read_text())
        print(synthesize_type(description, class_name=args.name or description.class_name), end="")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        run(args, config)
    except (ElementStoreError, ValueError, OSError, ImportError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
