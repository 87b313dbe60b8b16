"""$connect REQUEST authorizer: a static token check."""
from __future__ import annotations

import hmac
from typing import Any, Optional

from application.dtos.auth import (
    AuthorizationRequest,
    AuthorizerResult,
    PolicyDocument,
    PolicyStatement,
)
from core.logging_config import get_logger


logger = get_logger(__name__)


class AuthorizerService:
    def __init__(
        self,
        *,
        expected_token: str,
        principal_id: str = "user",
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        self._expected_token = expected_token
        self._principal_id = principal_id
        self._context = dict(context or {})

    def authorize(self, request: AuthorizationRequest) -> AuthorizerResult:
        allowed = self._token_matches(request.token)
        logger.info("authorization_decided", allowed=allowed, method_arn=request.method_arn)
        if allowed:
            return self._policy("Allow", request.method_arn, context=self._context)
        return self._policy("Deny", request.method_arn)

    def _token_matches(self, token: Optional[str]) -> bool:
        if not token or not self._expected_token:
            return False
        return hmac.compare_digest(token.encode("utf-8"), self._expected_token.encode("utf-8"))

    def _policy(self, effect: str, resource: str, context: Optional[dict[str, Any]] = None) -> AuthorizerResult:
        return AuthorizerResult(
            principal_id=self._principal_id,
            policy_document=PolicyDocument(
                statement=[PolicyStatement(effect=effect, resource=resource)],
            ),
            context=dict(context) if context else None,
        )
