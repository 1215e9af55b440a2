"""Security helpers for the storefront admin routes."""
from __future__ import annotations

import secrets
from typing import Iterable, List

from fastapi import HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer


class AdminTokenAuth:
    """Bearer token authentication for admin/reporting routes.

    Tokens are static operator secrets compared in constant time. With no
    tokens configured the admin surface stays closed.
    """

    def __init__(self, tokens: Iterable[str]):
        token_list: List[str] = [token.strip() for token in tokens if token.strip()]
        self._tokens = token_list
        self._bearer = HTTPBearer(auto_error=False)

    @property
    def enabled(self) -> bool:
        return bool(self._tokens)

    async def __call__(self, request: Request) -> None:
        if not self.enabled:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Admin access is not configured",
            )

        credentials: HTTPAuthorizationCredentials | None = await self._bearer(request)  # type: ignore[assignment]
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

        provided = credentials.credentials
        matched = False
        for token in self._tokens:
            if secrets.compare_digest(provided.encode("utf-8"), token.encode("utf-8")):
                matched = True

        if not matched:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin token")
        return None


__all__ = ["AdminTokenAuth"]
