"""
Object Store on Amazon S3.
"""

from __future__ import annotations

__all__ = ["AmazonS3"]

from typing import Any

import boto3
from botocore.exceptions import ClientError

from picset.core import Context, NCall, Provider, Response
from picset.core.exceptions import NotFoundError, PreconditionFailedError

from .._helper import (
    build_url,
    get_collection_name,
    get_id,
    get_method,
    get_properties,
)
from .._models import ObjectItem, ObjectKey, ObjectList, ObjectProperties


class AmazonS3(Provider):
    region: str | None
    profile_name: str | None
    aws_access_key_id: str | None
    aws_secret_access_key: str | None
    aws_session_token: str | None
    bucket: str | None
    public_base_url: str | None
    nparams: dict[str, Any]

    _client: Any

    def __init__(
        self,
        region: str | None = None,
        profile_name: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        bucket: str | None = None,
        public_base_url: str | None = None,
        nparams: dict[str, Any] = dict(),
        **kwargs,
    ):
        """Initialize.

        Args:
            region:
                AWS region name.
            profile_name:
                AWS profile name.
            aws_access_key_id:
                AWS access key id.
            aws_secret_access_key:
                AWS secret access key.
            aws_session_token:
                AWS session token.
            bucket:
                S3 bucket mapped to object store collection.
            public_base_url:
                Public base url objects are served from,
                e.g. a CDN in front of the bucket.
            nparams:
                Native parameters to boto3 client.
        """
        self.region = region
        self.profile_name = profile_name
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.aws_session_token = aws_session_token
        self.bucket = bucket
        self.public_base_url = public_base_url
        self.nparams = nparams

        self._client = None

    def __setup__(self, context: Context | None = None) -> None:
        if self._client is not None:
            return

        if self.profile_name is not None:
            session = boto3.Session(profile_name=self.profile_name)
            client = session.client(
                "s3",
                region_name=self.region,
                **self.nparams,
            )
        elif (
            self.aws_access_key_id is not None
            and self.aws_secret_access_key is not None
        ):
            client = boto3.client(
                "s3",
                region_name=self.region,
                aws_access_key_id=self.aws_access_key_id,
                aws_secret_access_key=self.aws_secret_access_key,
                aws_session_token=self.aws_session_token,
                **self.nparams,
            )
        else:
            client = boto3.client(
                "s3",
                region_name=self.region,
                **self.nparams,
            )

        self._client = client

    def _get_bucket_name(self, collection: str | None) -> str:
        return get_collection_name(collection, self.bucket, self.__component__)

    def _convert_url(self, bucket: str, id: str) -> str:
        if self.public_base_url is not None:
            return build_url(self.public_base_url, id)
        return f"https://{bucket}.s3.amazonaws.com/{id}"

    def put(
        self,
        key: str | dict | ObjectKey,
        value: bytes,
        metadata: dict | None = None,
        properties: dict | ObjectProperties | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        self.__setup__()
        id = get_id(key)
        bucket = self._get_bucket_name(collection)
        props = get_properties(properties)
        args: dict[str, Any] = {"Bucket": bucket, "Key": id, "Body": value}
        if props.cache_control is not None:
            args["CacheControl"] = props.cache_control
        if props.content_disposition is not None:
            args["ContentDisposition"] = props.content_disposition
        if props.content_type is not None:
            args["ContentType"] = props.content_type
        if metadata is not None:
            args["Metadata"] = metadata
        nresult = self._invoke(NCall(self._client.put_object, args))
        result_props = props.copy()
        result_props.content_length = len(value)
        if "ETag" in nresult:
            result_props.etag = nresult["ETag"]
        version = nresult.get("VersionId")
        return Response(
            result=ObjectItem(
                key=ObjectKey(id=id, version=version),
                properties=result_props,
                url=self._convert_url(bucket, id),
            ),
            native=dict(result=nresult),
        )

    def get(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        self.__setup__()
        id = get_id(key)
        bucket = self._get_bucket_name(collection)
        nresult = self._invoke(
            NCall(self._client.get_object, {"Bucket": bucket, "Key": id})
        )
        value = nresult["Body"].read()
        return Response(
            result=ObjectItem(
                key=ObjectKey(id=id, version=nresult.get("VersionId")),
                value=value,
                metadata=nresult.get("Metadata"),
                properties=self._convert_properties(nresult),
                url=self._convert_url(bucket, id),
            ),
            native=dict(result=nresult),
        )

    def delete(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        self.__setup__()
        id = get_id(key)
        bucket = self._get_bucket_name(collection)
        # S3 deletes are idempotent, check first to report missing keys.
        self._invoke(
            NCall(self._client.head_object, {"Bucket": bucket, "Key": id})
        )
        nresult = self._invoke(
            NCall(self._client.delete_object, {"Bucket": bucket, "Key": id})
        )
        return Response(result=None, native=dict(result=nresult))

    def query(
        self,
        prefix: str | None = None,
        limit: int | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectList]:
        self.__setup__()
        bucket = self._get_bucket_name(collection)
        items: list[ObjectItem] = []
        continuation_token = None
        while True:
            args: dict[str, Any] = {"Bucket": bucket}
            if prefix is not None:
                args["Prefix"] = prefix
            if continuation_token is not None:
                args["ContinuationToken"] = continuation_token
            if limit is not None:
                args["MaxKeys"] = limit - len(items)
            response = self._invoke(NCall(self._client.list_objects_v2, args))
            for content in response.get("Contents", []):
                items.append(
                    ObjectItem(
                        key=ObjectKey(id=content["Key"]),
                        properties=self._convert_properties(content),
                        url=self._convert_url(bucket, content["Key"]),
                    )
                )
            if limit is not None and len(items) >= limit:
                break
            if "NextContinuationToken" in response:
                continuation_token = response["NextContinuationToken"]
            else:
                break
        return Response(result=ObjectList(items=items))

    def generate(
        self,
        key: str | dict | ObjectKey,
        method: str = "GET",
        expiry: int | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        self.__setup__()
        id = get_id(key)
        bucket = self._get_bucket_name(collection)
        args: dict[str, Any] = {
            "ClientMethod": (
                "get_object" if get_method(method) == "GET" else "put_object"
            ),
            "Params": {"Bucket": bucket, "Key": id},
        }
        if expiry is not None:
            # Expiry is in milliseconds, S3 signs whole seconds.
            args["ExpiresIn"] = max(1, expiry // 1000)
        url = self._invoke(NCall(self._client.generate_presigned_url, args))
        return Response(
            result=ObjectItem(key=ObjectKey(id=id), url=url),
        )

    def close(self, **kwargs: Any) -> Response[None]:
        if self._client is not None:
            self._client.close()
            self._client = None
        return Response(result=None)

    @staticmethod
    def _invoke(ncall: NCall) -> Any:
        try:
            return ncall.invoke()
        except ClientError as e:
            code = e.response["Error"]["Code"]
            if code == "NoSuchKey" or code == "404":
                raise NotFoundError(str(e)) from e
            if code == "PreconditionFailed" or code == "412":
                raise PreconditionFailedError(str(e)) from e
            raise

    @staticmethod
    def _convert_properties(nresult: Any) -> ObjectProperties:
        properties = ObjectProperties()
        if "CacheControl" in nresult:
            properties.cache_control = nresult["CacheControl"]
        if "ContentDisposition" in nresult:
            properties.content_disposition = nresult["ContentDisposition"]
        if "ContentLength" in nresult:
            properties.content_length = nresult["ContentLength"]
        if "ContentType" in nresult:
            properties.content_type = nresult["ContentType"]
        if "LastModified" in nresult:
            properties.last_modified = nresult["LastModified"].timestamp()
        if "ETag" in nresult:
            properties.etag = nresult["ETag"]
        if "Size" in nresult:
            properties.content_length = nresult["Size"]
        return properties
