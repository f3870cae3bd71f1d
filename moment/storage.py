import logging
import os
import uuid
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import R2_ACCESS_KEY_ID, R2_ACCOUNT_ID, R2_BUCKET_NAME, R2_PUBLIC_URL, R2_SECRET_ACCESS_KEY
from .errors import UpstreamFailure

logger = logging.getLogger(__name__)

# Presigned URL expiration time (7 days, the S3 maximum)
PRESIGNED_URL_EXPIRATION = 7 * 24 * 3600


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


class UploadRelay:
    """Object storage for avatars, portfolio images and registration documents."""

    def upload(self, data: bytes, folder: str, filename: Optional[str], content_type: Optional[str]) -> dict:
        """Store the bytes and return {"url", "publicId"}"""
        raise NotImplementedError

    def delete(self, public_id: str) -> None:
        raise NotImplementedError


class R2UploadRelay(UploadRelay):
    def __init__(self, client=None, bucket: str = R2_BUCKET_NAME, public_url: str = R2_PUBLIC_URL):
        self.client = client or get_r2_client()
        self.bucket = bucket
        self.public_url = public_url

    def object_url(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{key}"
        params = {"Bucket": self.bucket, "Key": key, "ResponseContentDisposition": "inline"}
        return self.client.generate_presigned_url(
            "get_object", Params=params, ExpiresIn=PRESIGNED_URL_EXPIRATION
        )

    def upload(self, data, folder, filename, content_type):
        ext = os.path.splitext(filename or "")[1].lower()
        key = f"{folder}/{uuid.uuid4().hex}{ext}"
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
            url = self.object_url(key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Upload failed for {key}: {e}")
            raise UpstreamFailure("Upload failed") from e
        logger.info(f"✅ Uploaded {len(data)} bytes to {key}")
        return {"url": url, "publicId": key}

    def delete(self, public_id):
        try:
            self.client.delete_object(Bucket=self.bucket, Key=public_id)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Failed to delete {public_id}: {e}")
            raise UpstreamFailure("Failed to delete file") from e
        logger.info(f"🗑️ Deleted object {public_id}")


def get_upload_relay() -> UploadRelay:
    return R2UploadRelay()
