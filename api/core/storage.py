"""
Object store client (S3-compatible; Backblaze B2 in production).

Used operations:
- pre-signed PUT URL for browser uploads
- put_object for proxied uploads
"""

from __future__ import annotations

from functools import lru_cache

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from . import settings
from .errors import InternalFailure


# Storage failures are explicit and separable from database errors.
class StorageError(InternalFailure):
    pass


@lru_cache(maxsize=1)
def get_s3():
    """
    Create and cache a configured boto3 S3 client.
    """
    session = boto3.session.Session(
        aws_access_key_id=settings.s3_key_id() or None,
        aws_secret_access_key=settings.s3_app_key() or None,
        region_name=settings.s3_region(),
    )
    return session.client(
        "s3",
        endpoint_url=settings.s3_endpoint(),
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


def _bucket() -> str:
    bucket = settings.s3_bucket()
    if not bucket:
        raise StorageError("B2_BUCKET is not set.")
    return bucket


def public_url(storage_key: str) -> str:
    return f"{settings.public_base_url()}/{storage_key}"


def presign_put(storage_key: str, *, expires_in: int = settings.SIGNED_URL_EXPIRES_S) -> str:
    """
    Return a time-limited URL the client can PUT the object to.

    Nothing is checked against the store here; the key may never be used.
    """
    try:
        return get_s3().generate_presigned_url(
            ClientMethod="put_object",
            Params={"Bucket": _bucket(), "Key": storage_key},
            ExpiresIn=expires_in,
            HttpMethod="PUT",
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Could not sign upload URL: {e}") from e


def put_object(storage_key: str, body: bytes, *, content_type: str) -> None:
    """
    Blocking upload. Call it from a worker thread inside async code.
    """
    try:
        get_s3().put_object(
            Bucket=_bucket(),
            Key=storage_key,
            Body=body,
            ContentType=content_type,
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Object store upload failed: {e}") from e
