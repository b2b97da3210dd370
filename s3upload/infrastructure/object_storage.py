from __future__ import annotations

import logging
from typing import Any, BinaryIO

from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
import boto3

from s3upload.config import Settings, settings as default_settings
from s3upload.domain.object_store import ObjectStoreClient, StoreError

logger = logging.getLogger("s3upload.storage")


def _to_store_error(exc: Exception) -> StoreError:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = str(error.get("Code", "") or "ClientError")
        message = str(error.get("Message", "") or exc)
        return StoreError(code, message)
    return StoreError(type(exc).__name__, str(exc))


def create_session(config: Settings | None = None) -> boto3.session.Session:
    config = config or default_settings
    return boto3.session.Session(
        aws_access_key_id=config.s3_access_key,
        aws_secret_access_key=config.s3_secret_key,
        region_name=config.s3_region,
    )


class S3ObjectStoreClient(ObjectStoreClient):
    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_session(cls, session: boto3.session.Session, config: Settings | None = None) -> S3ObjectStoreClient:
        config = config or default_settings
        client = session.client(
            "s3",
            endpoint_url=config.s3_endpoint_url,
            use_ssl=config.s3_secure,
            config=Config(signature_version="s3v4", s3={"addressing_style": config.s3_addressing_style}),
        )
        logger.debug("s3 client for %s (%s)", config.s3_endpoint_url or "aws", config.s3_region)
        return cls(client)

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> S3ObjectStoreClient:
        return cls.from_session(create_session(config), config)

    def list_buckets(self) -> list[str]:
        try:
            response = self._client.list_buckets()
        except (ClientError, BotoCoreError) as exc:
            raise _to_store_error(exc) from exc
        return [bucket["Name"] for bucket in response.get("Buckets", [])]

    def create_bucket(self, name: str) -> None:
        params: dict[str, Any] = {"Bucket": name}
        region = self._client.meta.region_name
        # us-east-1 rejects an explicit location constraint.
        if region and region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}
        try:
            self._client.create_bucket(**params)
        except (ClientError, BotoCoreError) as exc:
            raise _to_store_error(exc) from exc

    def put_object(self, bucket: str, key: str, body: BinaryIO) -> None:
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=body)
        except (ClientError, BotoCoreError) as exc:
            raise _to_store_error(exc) from exc
