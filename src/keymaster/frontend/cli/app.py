"""
KeyMaster command line: generate AES keys and encrypt/decrypt text or files.

Commands:
  ?                   -> print usage
  /v                  -> print the version
  /c [/clip]          -> print a new random key as uppercase hex (optionally copy it)
  /e <text> <key>     -> encrypt text with a hex key, print Base64
  /d <cipher> <key>   -> decrypt Base64 with a hex key, print text
  /ef <file>          -> encrypt a file in place with a password
  /df <file>          -> decrypt a file in place with a password

Start with `keymaster ...` or `python -m keymaster.frontend.cli.app ...`.
Exit code is 0 on success and 1 on any error or invalid arguments.
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Callable, Sequence

from keymaster.core.version import __version__
from keymaster.frontend.cli.clipboard import copy_key
from keymaster.frontend.cli.context import CliConfig, build_config
from keymaster.frontend.cli.logging_config import configure_logging
from keymaster.frontend.cli.prompt import read_password
from keymaster.security.crypto import decrypt_file_stream, encrypt_file_stream
from keymaster.security.encryption import decrypt, encrypt
from keymaster.security.kdf import bytes_to_string, string_to_bytes
from keymaster.security.keygen import create_key


logger = logging.getLogger(__name__)

USAGE_TEXT = (
    "keymaster [option]\n"
    "Options:\n"
    "\t/v                        Displays the current version of KeyMaster\n"
    "\t/c [/clip]                Creates a new AES encryption key\n"
    "\t/d  <cipher> <key>        Decrypts the cipher with specified key\n"
    "\t/e  <text> <key>          Encrypts the plain text with specified key\n"
    "\t/df <file>                Decrypts the specified file\n"
    "\t/ef <file>                Encrypts the specified file\n"
)

FileTransform = Callable[[Path, Path, str], None]


def transform_in_place(path: str | Path, transform: FileTransform) -> None:
    """
    Run ``transform`` from ``path`` into ``<path>.tmp`` and move the result
    over ``path``.

    The password is prompted for only once the file is known to exist. If the
    transform fails the temporary file is removed and ``path`` is untouched.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError("file not found.")

    tmp_path = path.with_name(path.name + ".tmp")
    password = read_password()

    try:
        transform(path, tmp_path, password)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    # atomic on POSIX and Windows
    os.replace(tmp_path, path)
    logger.debug("replaced %s", path)


def cmd_create_key(clip: bool = False) -> None:
    hex_key = bytes_to_string(create_key())
    print(hex_key)
    if clip and copy_key(hex_key):
        print("Key copied to clipboard.", file=sys.stderr)


def cmd_encrypt(text: str, hex_key: str) -> None:
    print(encrypt(text, string_to_bytes(hex_key)))


def cmd_decrypt(cipher: str, hex_key: str) -> None:
    print(decrypt(cipher, string_to_bytes(hex_key)))


def cmd_encrypt_file(path: str) -> None:
    transform_in_place(path, encrypt_file_stream)


def cmd_decrypt_file(path: str) -> None:
    transform_in_place(path, decrypt_file_stream)


def _print_usage() -> None:
    print(f"Usage: \n\t{USAGE_TEXT}", file=sys.stderr)


def _dispatch(args: Sequence[str]) -> int:
    cmd = args[0].lower() if args else ""

    if len(args) == 1 and args[0] == "?":
        _print_usage()
    elif len(args) == 1 and args[0] == "/v":
        # the only case-sensitive switch
        print(__version__)
    elif cmd == "/c" and len(args) == 1:
        cmd_create_key()
    elif cmd == "/c" and len(args) == 2 and args[1].lower() == "/clip":
        cmd_create_key(clip=True)
    elif len(args) == 3 and cmd == "/e" and args[1] and args[2]:
        cmd_encrypt(args[1], args[2])
    elif len(args) == 3 and cmd == "/d" and args[1] and args[2]:
        cmd_decrypt(args[1], args[2])
    elif len(args) == 2 and cmd == "/ef" and args[1]:
        cmd_encrypt_file(args[1])
    elif len(args) == 2 and cmd == "/df" and args[1]:
        cmd_decrypt_file(args[1])
    else:
        print("Invalid or missing command line arguments. Please try again.", file=sys.stderr)
        _print_usage()
        return 1
    return 0


def main(argv: Sequence[str], config: CliConfig | None = None) -> int:
    if config is None:
        config = build_config()
    configure_logging(config.log_level)

    try:
        return _dispatch(list(argv[1:]))
    except Exception as exc:
        print(exc, file=sys.stderr)
        if config.debug:
            print("Call Stack:", file=sys.stderr)
            traceback.print_exc(file=sys.stderr)
        return 1


def run() -> None:
    """Console-script entry point."""
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    run()
