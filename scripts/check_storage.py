import asyncio
import sys
import os

# Ensure the package is in python path
sys.path.append(os.getcwd())

from multipart_broker.config import settings
from multipart_broker.core.exceptions import StorageError
from multipart_broker.repositories.storage_repo import StorageRepository


async def check_storage_connectivity() -> int:
    repo = StorageRepository()

    print("--- Checking Storage Connectivity ---")
    print(f"Provider: {settings.storage_provider.upper()}")

    try:
        client = await repo._get_client()
        print("✅ Client initialized successfully")
        print(f"   Endpoint: {client.meta.endpoint_url}")
        print(f"   Bucket: {repo.bucket_name}")
    except StorageError as e:
        print(f"❌ Failed to initialize client: {e}")
        return 1

    # Open and immediately abort a session to prove multipart permissions
    try:
        upload_id = await repo.initiate_multipart_upload(".connectivity-check")
        await repo.abort_multipart_upload(".connectivity-check", upload_id)
        print("✅ Multipart create/abort succeeded")
    except StorageError as e:
        print(f"❌ Multipart check failed ({e.operation}): {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(check_storage_connectivity()))
