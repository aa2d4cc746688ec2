"""
client_store.secrets — Credential bundle from the secrets Lambda.

The secrets function returns an API-Gateway-style envelope, decoded in
three steps:

    Payload            -> {"statusCode": 200, "body": "<json>"}
    body               -> {"secret": "<json>"}
    secret             -> {"AWS_ACCESS_KEY_ID": ..., "AWS_SECRET_ACCESS_KEY": ...}

A failure at any step raises SecretFetchError. No retry is attempted here.
"""

from __future__ import annotations

import json
import os
from typing import Any

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from client_store.exceptions import SecretFetchError
from client_store.models import CredentialBundle

logger = Logger(service="client-store-lib")

SECRETS_REGION = os.environ.get("SECRETS_REGION", "us-east-2")
SECRETS_FUNCTION_NAME = os.environ.get("SECRETS_FUNCTION_NAME", "fetchSecretsFunction_gr8")


def _decode_json_object(raw: Any, *, step: str) -> dict[str, Any]:
    if isinstance(raw, bytes | bytearray):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SecretFetchError(f"{step} is not valid UTF-8", cause=exc) from exc
    if not isinstance(raw, str):
        raise SecretFetchError(f"{step} is not a JSON string")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SecretFetchError(f"{step} is not valid JSON", cause=exc) from exc
    if not isinstance(value, dict):
        raise SecretFetchError(f"{step} must be a JSON object")
    return value


class LambdaSecretSource:
    """Fetches the service credentials by invoking the secrets Lambda."""

    def __init__(
        self,
        *,
        function_name: str = SECRETS_FUNCTION_NAME,
        region: str = SECRETS_REGION,
        lambda_client: Any = None,
    ) -> None:
        self.function_name = function_name
        self.region = region
        self._lambda: Any = lambda_client or boto3.client("lambda", region_name=region)

    def _invoke(self) -> bytes:
        try:
            response = self._lambda.invoke(FunctionName=self.function_name)
        except (ClientError, BotoCoreError) as exc:
            raise SecretFetchError("secrets function invocation failed", cause=exc) from exc

        if response.get("FunctionError"):
            raise SecretFetchError(f"secrets function error: {response['FunctionError']}")
        payload = response.get("Payload")
        if payload is None:
            raise SecretFetchError("secrets function returned no payload")
        if not hasattr(payload, "read"):
            return payload
        try:
            return payload.read()
        except (ClientError, BotoCoreError, OSError) as exc:
            raise SecretFetchError("secrets payload could not be read", cause=exc) from exc

    def fetch_secrets(self) -> CredentialBundle:
        try:
            envelope = _decode_json_object(self._invoke(), step="payload")
            if envelope.get("errorMessage"):
                raise SecretFetchError(str(envelope["errorMessage"]))
            status_code = envelope.get("statusCode")
            if status_code is not None and status_code not in range(200, 300):
                raise SecretFetchError(f"secrets function returned status {status_code}")

            body = _decode_json_object(envelope.get("body"), step="body")
            secret = _decode_json_object(body.get("secret"), step="secret")
            try:
                return CredentialBundle.from_secret(secret)
            except KeyError as exc:
                raise SecretFetchError(f"secret is missing {exc.args[0]}") from exc
        except SecretFetchError:
            logger.exception(
                "Error invoking secrets function",
                function_name=self.function_name,
                region=self.region,
            )
            raise
