#!/usr/bin/env python3
"""
recordctl - recordcrypto CLI

Command-line interface for hashing, signing and verifying JSON records.

Usage:
    recordctl keygen              - Generate a keypair
    recordctl random              - Print random bytes as hex
    recordctl hash TEXT           - Hash a string
    recordctl hash-obj FILE       - Hash a JSON record
    recordctl sign FILE           - Sign a JSON record
    recordctl verify FILE         - Verify a signed JSON record

Exit codes:
    0 - success / signature valid
    1 - signature invalid, or usage error
    2 - malformed input (bad JSON or UTF-8, keys or signatures)
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Any, List, Optional

import recordcrypto
from recordcrypto import __version__
from recordcrypto.config import Config


logger = logging.getLogger("recordctl")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MALFORMED = 2


def _read_record(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


class RecordCtl:
    """recordctl CLI application."""

    def keygen(self) -> int:
        """Generate a keypair."""
        keypair = recordcrypto.generate_keypair()
        _print_json(keypair.to_dict())
        return EXIT_OK

    def random(self, n: int) -> int:
        """Print n random bytes as hex."""
        try:
            value = recordcrypto.random_bytes(n)
        except recordcrypto.InvalidArgument as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_FAILURE
        print(value)
        return EXIT_OK

    def hash(self, text: str) -> int:
        """Hash a string."""
        print(recordcrypto.hash(text))
        return EXIT_OK

    def hash_obj(self, path: Path, remove_sign: bool = False) -> int:
        """Hash a JSON record."""
        record = _read_record(path)
        print(recordcrypto.hash_obj(record, remove_sign=remove_sign))
        return EXIT_OK

    def sign(
        self,
        path: Path,
        secret_key: str,
        public_key: Optional[str] = None,
        output: Optional[Path] = None,
    ) -> int:
        """Sign a JSON record and write it out."""
        record = _read_record(path)
        if public_key is None:
            public_key = recordcrypto.keypair_from_secret_key(secret_key).public_key

        recordcrypto.sign_obj(record, secret_key, public_key)
        logger.debug(f"Signed {path} as {public_key[:16]}...")

        if output is None:
            _print_json(record)
        else:
            with open(output, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2, ensure_ascii=False)
                f.write("\n")
            print(f"Signed record written to {output}")
        return EXIT_OK

    def verify(self, path: Path) -> int:
        """Verify a signed JSON record."""
        record = _read_record(path)
        if recordcrypto.verify_obj(record):
            print("valid")
            return EXIT_OK
        print("invalid")
        return EXIT_FAILURE


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="recordctl",
        description="Hash, sign and verify JSON records",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Configuration file path",
    )
    parser.add_argument(
        "--hash-key",
        help="Hash key as hex (overrides config and environment)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"recordctl {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # keygen command
    subparsers.add_parser("keygen", help="Generate a keypair")

    # random command
    random_parser = subparsers.add_parser("random", help="Print random bytes as hex")
    random_parser.add_argument(
        "-n", "--bytes",
        type=int,
        default=32,
        help="Number of bytes",
    )

    # hash command
    hash_parser = subparsers.add_parser("hash", help="Hash a string")
    hash_parser.add_argument("text", help="Text to hash")

    # hash-obj command
    hash_obj_parser = subparsers.add_parser("hash-obj", help="Hash a JSON record")
    hash_obj_parser.add_argument("file", type=Path, help="JSON record file")
    hash_obj_parser.add_argument(
        "--remove-sign",
        action="store_true",
        help="Leave the signature envelope out of the digest",
    )

    # sign command
    sign_parser = subparsers.add_parser("sign", help="Sign a JSON record")
    sign_parser.add_argument("file", type=Path, help="JSON record file")
    sign_parser.add_argument("--secret-key", required=True, help="Secret key (hex)")
    sign_parser.add_argument(
        "--public-key",
        help="Public key (hex, default: derived from the secret key)",
    )
    sign_parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Write the signed record here instead of stdout",
    )

    # verify command
    verify_parser = subparsers.add_parser("verify", help="Verify a signed JSON record")
    verify_parser.add_argument("file", type=Path, help="Signed JSON record file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    try:
        config = Config.load(args.config)
        if args.hash_key:
            config.crypto.hash_key = args.hash_key
        config.validate()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logging.basicConfig(
        level=config.log_level_number,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    recordcrypto.initialize(config.crypto.hash_key)

    cli = RecordCtl()

    try:
        if args.command == "keygen":
            return cli.keygen()
        elif args.command == "random":
            return cli.random(args.bytes)
        elif args.command == "hash":
            return cli.hash(args.text)
        elif args.command == "hash-obj":
            return cli.hash_obj(args.file, remove_sign=args.remove_sign)
        elif args.command == "sign":
            return cli.sign(
                args.file,
                args.secret_key,
                public_key=args.public_key,
                output=args.output,
            )
        elif args.command == "verify":
            return cli.verify(args.file)
        else:
            parser.print_help()
            return EXIT_FAILURE
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON: {e}", file=sys.stderr)
        return EXIT_MALFORMED
    except UnicodeDecodeError as e:
        print(f"Error: input is not valid UTF-8: {e}", file=sys.stderr)
        return EXIT_MALFORMED
    except recordcrypto.CryptoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_MALFORMED


if __name__ == "__main__":
    sys.exit(main())
