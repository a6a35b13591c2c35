# seed_users.py
"""
Build a users JSON file for File Vault with bcrypt-hashed passwords.

Usage:
  python seed_users.py --out users.json --user alice:s3cret:/srv/alice --user bob:hunter2
  python seed_users.py --out users.json --user carol:pw --rounds 10 --force

Entries without a directory use the server's FILES_PATH at runtime.
"""
import argparse
import json
import os
import sys
import time
from datetime import datetime, timezone

from auth.utils import hash_password


def now_iso():
    return datetime.now(timezone.utc).isoformat()


def parse_user(spec: str):
    """Split 'name:password[:directory]'. The directory may itself contain ':'."""
    parts = spec.split(":", 2)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise argparse.ArgumentTypeError(f"expected name:password[:directory], got {spec!r}")
    name, password = parts[0], parts[1]
    directory = parts[2] if len(parts) == 3 and parts[2] else None
    return name, password, directory


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", default="users.json")
    ap.add_argument("--user", action="append", type=parse_user, required=True,
                    help="name:password[:directory]; repeat for more users")
    ap.add_argument("--rounds", type=int, default=12, help="bcrypt cost factor")
    ap.add_argument("--force", action="store_true", help="overwrite an existing --out file")
    args = ap.parse_args()

    if os.path.exists(args.out) and not args.force:
        print(f"{args.out} exists; pass --force to overwrite", file=sys.stderr)
        sys.exit(1)

    start_iso = now_iso()
    t0 = time.perf_counter()

    users = {}
    for name, password, directory in args.user:
        if name in users:
            print(f"duplicate user {name!r}", file=sys.stderr)
            sys.exit(1)
        entry = {"password": hash_password(password, rounds=args.rounds)}
        if directory:
            entry["directory"] = os.path.abspath(os.path.expanduser(directory))
        users[name] = entry

    with open(args.out, "w", encoding="utf-8") as outf:
        json.dump(users, outf, indent=2)
        outf.write("\n")

    dt = time.perf_counter() - t0
    print(f"START: {start_iso}")
    print(f"END:   {now_iso()}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"WROTE: {len(users)} user(s) to {args.out}")


if __name__ == "__main__":
    main()
