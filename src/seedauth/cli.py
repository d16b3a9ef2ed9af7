"""Command line interface.

    seedauth keygen
    seedauth pubkey
    seedauth sign FILE
    seedauth get PATH
    seedauth post PATH FILE
    seedauth approval CHALLENGE_FILE TRANSACTION_FILE
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

import httpx

from . import __version__
from .approval import dumps_response, respond
from .client import SeedAuthClient
from .config import CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH, load_config
from .encoding import to_hex
from .keys import derive_key_pair, generate_seed, public_key
from .signing import sign_message
from .types import Config, MalformedChallenge, MalformedPayload, SeedAuthError

logger = logging.getLogger(__name__)


def _load_json(path: str, error_cls) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise error_cls(f"{path} is not valid JSON: {exc.msg} (line {exc.lineno})")
    except UnicodeDecodeError:
        raise error_cls(f"{path} is not valid UTF-8")


def cmd_keygen(args: argparse.Namespace) -> str:
    seed = generate_seed()
    return json.dumps({"seed": to_hex(seed), "pub_key": to_hex(public_key(seed))}, indent=2)


def cmd_pubkey(args: argparse.Namespace, config: Config) -> str:
    return to_hex(public_key(config.api_key.seed))


def cmd_sign(args: argparse.Namespace, config: Config) -> str:
    data = Path(args.file).read_bytes()
    return sign_message(derive_key_pair(config.api_key.seed), data)


def cmd_get(args: argparse.Namespace, config: Config) -> str:
    async def run():
        async with SeedAuthClient(config) as client:
            return await client.get(args.path)

    return json.dumps(asyncio.run(run()), indent=2)


def cmd_post(args: argparse.Namespace, config: Config) -> str:
    try:
        body = Path(args.file).read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise MalformedPayload(f"{args.file} is not valid UTF-8")

    async def run():
        async with SeedAuthClient(config) as client:
            return await client.post(args.path, body=body)

    return json.dumps(asyncio.run(run()), indent=2)


def cmd_approval(args: argparse.Namespace, config: Config) -> str:
    challenge = _load_json(args.challenge, MalformedChallenge)
    transaction = _load_json(args.transaction, MalformedPayload)
    response = respond(
        challenge,
        transaction,
        derive_key_pair(config.api_key.seed),
        allow_missing=args.allow_missing,
    )
    return dumps_response(response)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seedauth",
        description="Sign API requests and transaction approvals with Ed25519.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c",
        "--config",
        default=os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH),
        help=f"configuration file (default: ${CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("keygen", help="generate a new seed and public key")
    p.set_defaults(func=cmd_keygen, needs_config=False)

    p = sub.add_parser("pubkey", help="print the public key of the configured seed")
    p.set_defaults(func=cmd_pubkey, needs_config=True)

    p = sub.add_parser("sign", help="sign a file and print the hex signature")
    p.add_argument("file")
    p.set_defaults(func=cmd_sign, needs_config=True)

    p = sub.add_parser("get", help="signed GET request")
    p.add_argument("path")
    p.set_defaults(func=cmd_get, needs_config=True)

    p = sub.add_parser("post", help="signed POST request with a JSON body file")
    p.add_argument("path")
    p.add_argument("file")
    p.set_defaults(func=cmd_post, needs_config=True)

    p = sub.add_parser("approval", help="answer an approval challenge")
    p.add_argument("challenge", help="challenge JSON file")
    p.add_argument("transaction", help="transaction JSON file")
    p.add_argument(
        "--allow-missing",
        action="store_true",
        help="sign attributes absent from the transaction as empty values",
    )
    p.set_defaults(func=cmd_approval, needs_config=True)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    logger.debug("Running %s command", args.command)
    try:
        if args.needs_config:
            output = args.func(args, load_config(args.config))
        else:
            output = args.func(args)
    except SeedAuthError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except (OSError, httpx.HTTPError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
