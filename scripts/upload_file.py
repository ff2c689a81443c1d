"""Upload a file through a running broker in presigned parts."""

import argparse
import asyncio
import os
import sys

# Ensure the package is in python path
sys.path.append(os.getcwd())

import httpx

from multipart_broker.client import UploadClient, UploadFailedError
from multipart_broker.utils.constants import DEFAULT_CHUNK_SIZE


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", help="File to upload")
    parser.add_argument("--url", default="http://localhost:8080", help="Broker base URL")
    parser.add_argument(
        "--chunk-size-mb",
        type=int,
        default=DEFAULT_CHUNK_SIZE // (1024 * 1024),
        help="Part size in MB (S3 requires at least 5 for all but the last part)",
    )
    parser.add_argument("--concurrency", type=int, default=4, help="Parallel part uploads")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    client = UploadClient(
        args.url,
        chunk_size=args.chunk_size_mb * 1024 * 1024,
        max_concurrency=args.concurrency,
    )
    try:
        key = await client.upload(args.path)
    except UploadFailedError as e:
        print(f"❌ Upload aborted ({e.upload_id}): {e}")
        return 1
    except httpx.HTTPError as e:
        print(f"❌ Broker request failed: {e}")
        return 1
    print(f"✅ Uploaded {args.path} as {key}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
