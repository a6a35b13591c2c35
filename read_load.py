"""
read_load.py: simple async load script for authenticated downloads

Usage:
  python read_load.py --base http://127.0.0.1:8000 --user alice --password s3cret \
      --in paths.txt --count 15000 --concurrency 200

paths.txt holds one path per line, relative to the user's root (e.g. notes.txt,
docs/report.pdf). An empty file or a blank line means the root listing.
"""
import argparse
import asyncio
import random
import time
from datetime import datetime, timezone
from urllib.parse import quote

import httpx

def _now_iso():
    return datetime.now(timezone.utc).isoformat()

def _load_paths(path):
    paths = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            paths.append(line.strip().lstrip("/"))
    return paths or [""]

async def _hit_one(client: httpx.AsyncClient, base: str, rel: str):
    try:
        total = 0
        async with client.stream("GET", f"{base}/files/{quote(rel)}", timeout=30) as r:
            async for chunk in r.aiter_bytes():
                total += len(chunk)
        return r.status_code == 200, total
    except httpx.HTTPError:
        return False, 0

async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--user", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--in", dest="paths_file", default="paths.txt")
    parser.add_argument("--count", type=int, default=15000)
    parser.add_argument("--concurrency", type=int, default=200)
    args = parser.parse_args()

    paths = _load_paths(args.paths_file)

    start_iso = _now_iso()
    t0 = time.perf_counter()
    success = 0
    transferred = 0

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    auth = httpx.BasicAuth(args.user, args.password)
    async with httpx.AsyncClient(limits=limit, auth=auth) as client:
        sem = asyncio.Semaphore(args.concurrency)

        async def _task(i):
            nonlocal success, transferred
            async with sem:
                ok, size = await _hit_one(client, args.base, random.choice(paths))
                if ok:
                    success += 1
                    transferred += size

        await asyncio.gather(*(_task(i) for i in range(args.count)))

    dt = time.perf_counter() - t0
    end_iso = _now_iso()
    print(f"START: {start_iso}")
    print(f"END:   {end_iso}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"OPS:   reads={args.count}, ok={success}, fail={args.count - success}")
    print(f"BYTES: {transferred}")
    if dt > 0:
        print(f"RPS:   {success/dt:.1f} req/s")

if __name__ == "__main__":
    asyncio.run(main())
