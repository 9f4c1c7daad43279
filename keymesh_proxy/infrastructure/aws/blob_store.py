"""
S3 blob store for prekey bundles.
"""

from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from keymesh_proxy.core.config import settings
from keymesh_proxy.core.exceptions import BlobStoreError
from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.infrastructure.aws.session import create_client

logger = get_logger(__name__)


class S3BlobStore:
    """Writes objects to the prekeys bucket."""

    def __init__(self, bucket_name: Optional[str] = None):
        self.bucket_name = bucket_name or settings.PREKEYS_BUCKET_NAME
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = create_client("s3")
        return self._client

    async def put_object(
        self, key: str, body: bytes, content_type: str = "application/json"
    ) -> None:
        """
        Store body at key, replacing any existing object.

        Raises:
            BlobStoreError: If S3 rejects the write
        """
        client = self._get_client()

        try:
            await run_in_threadpool(
                client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to put object {key} to S3: {e}")
            raise BlobStoreError(
                f"Failed to store object: {key}", {"bucket": self.bucket_name}
            )

        logger.info(f"Stored object in S3: {self.bucket_name}/{key}")


# Global blob store instance
blob_store = S3BlobStore()
