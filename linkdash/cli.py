from __future__ import annotations

import argparse
import getpass
import secrets
import sys

from linkdash.core.config import get_settings
from linkdash.core.security import hash_password


def _hash_password(args: argparse.Namespace) -> int:
    password = args.password
    if password is None:
        password = getpass.getpass("Enter dashboard password: ")
        if password != getpass.getpass("Repeat password: "):
            print("Passwords do not match", file=sys.stderr)
            return 1
    if not password:
        print("Password must not be empty", file=sys.stderr)
        return 1

    print("Add the following to your .env file:\n")
    print(f"DASHBOARD_PASSWORD_HASH={hash_password(password, rounds=args.rounds)}")
    print(f"JWT_SECRET={secrets.token_hex(32)}")
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "linkdash.main:create_app",
        factory=True,
        host=args.host or settings.uvicorn_host or "127.0.0.1",
        port=args.port or settings.uvicorn_port or 8000,
        log_level=(settings.uvicorn_log_level or settings.log_level).lower(),
        reload=args.reload,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="linkdash", description="Link tracker dashboard API")
    sub = p.add_subparsers(dest="command", required=True)

    hp = sub.add_parser("hash-password", help="Generate DASHBOARD_PASSWORD_HASH and JWT_SECRET values")
    hp.add_argument("--password", help="Password to hash (prompted when omitted)")
    hp.add_argument("--rounds", type=int, default=12, help="bcrypt cost factor")
    hp.set_defaults(func=_hash_password)

    sp = sub.add_parser("serve", help="Run the API with uvicorn")
    sp.add_argument("--host")
    sp.add_argument("--port", type=int)
    sp.add_argument("--reload", action="store_true")
    sp.set_defaults(func=_serve)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
