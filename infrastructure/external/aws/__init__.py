"""boto3 client construction shared by every AWS-backed adapter.

Clients are created lazily and cached per (service, endpoint) for the life
of the process, so warm Lambda invocations reuse connections.
"""
from __future__ import annotations

import threading
from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig

from core.config import AwsSettings, settings
from core.logging_config import get_logger


logger = get_logger(__name__)

_clients: dict[tuple[str, Optional[str]], Any] = {}
_resources: dict[tuple[str, Optional[str]], Any] = {}
_lock = threading.Lock()


def build_boto_config(aws: AwsSettings) -> BotoConfig:
    return BotoConfig(
        region_name=aws.region,
        retries={
            "max_attempts": aws.max_retry_attempts,
            "mode": "standard",
        },
        connect_timeout=aws.connect_timeout,
        read_timeout=aws.read_timeout,
    )


def _client_args(service_name: str, endpoint_url: Optional[str], aws: AwsSettings) -> dict[str, Any]:
    args: dict[str, Any] = {
        "service_name": service_name,
        "config": build_boto_config(aws),
    }
    if aws.access_key_id and aws.secret_access_key:
        args.update({
            "aws_access_key_id": aws.access_key_id,
            "aws_secret_access_key": aws.secret_access_key,
        })
        if aws.session_token:
            args["aws_session_token"] = aws.session_token
    if endpoint_url:
        args["endpoint_url"] = endpoint_url
    return args


def get_client(service_name: str, *, endpoint_url: Optional[str] = None, aws: Optional[AwsSettings] = None) -> Any:
    """Pooled low-level client; ``endpoint_url`` defaults to ``AWS__ENDPOINT_URL``."""
    aws = aws or settings.aws
    endpoint = endpoint_url or aws.endpoint_url
    key = (service_name, endpoint)
    with _lock:
        client = _clients.get(key)
        if client is None:
            client = boto3.client(**_client_args(service_name, endpoint, aws))
            _clients[key] = client
            logger.info("aws_client_created", service=service_name, endpoint=endpoint)
        return client


def get_resource(service_name: str, *, aws: Optional[AwsSettings] = None) -> Any:
    aws = aws or settings.aws
    key = (service_name, aws.endpoint_url)
    with _lock:
        resource = _resources.get(key)
        if resource is None:
            resource = boto3.resource(**_client_args(service_name, aws.endpoint_url, aws))
            _resources[key] = resource
            logger.info("aws_resource_created", service=service_name, endpoint=aws.endpoint_url)
        return resource


def shutdown_clients() -> None:
    with _lock:
        for client in _clients.values():
            close = getattr(client, "close", None)
            if callable(close):
                try:
                    close()
                except Exception as exc:
                    logger.warning("aws_client_close_failed", error=str(exc))
        _clients.clear()
        _resources.clear()
    logger.info("aws_clients_shutdown")


def error_code(exc: BaseException) -> str:
    """``ClientError`` code, or empty string for anything else."""
    response = getattr(exc, "response", None) or {}
    return str(response.get("Error", {}).get("Code", ""))


def http_status(exc: BaseException) -> Optional[int]:
    response = getattr(exc, "response", None) or {}
    return response.get("ResponseMetadata", {}).get("HTTPStatusCode")


__all__ = [
    "build_boto_config",
    "get_client",
    "get_resource",
    "shutdown_clients",
    "error_code",
    "http_status",
]
