"""
boto3 client factory shared by the S3 and Lambda adapters.
"""

import boto3
from botocore.client import Config

from keymesh_proxy.core.config import settings


def create_client(service_name: str):
    """
    Create a boto3 client with the configured timeouts.

    Retries are disabled; callers surface the first failure.
    """
    return boto3.client(
        service_name,
        region_name=settings.AWS_REGION,
        config=Config(
            connect_timeout=settings.AWS_CONNECT_TIMEOUT,
            read_timeout=settings.AWS_READ_TIMEOUT,
            retries={"total_max_attempts": 1},
        ),
    )
