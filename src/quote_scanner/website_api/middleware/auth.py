"""Shared-secret and body-signature authentication for /v1 routes."""

import hmac
import hashlib
from fastapi import Request, HTTPException
from ..config import settings

SIGNATURE_HEADER = "X-QS-Signature"
SECRET_HEADER = "X-QS-Secret"


def sign_body(body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of a request body, as the funnel backend sends it."""
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


async def verify_signature(request: Request):
    """Accept a request signed with QS_API_SECRET or carrying it directly.

    The funnel's server-side calls sign the JSON body (X-QS-Signature);
    internal tooling may send the secret itself (X-QS-Secret).
    """
    secret = settings.api_secret

    signature = request.headers.get(SIGNATURE_HEADER)
    if signature:
        body = await request.body()
        if hmac.compare_digest(signature, sign_body(body, secret)):
            return True

    shared = request.headers.get(SECRET_HEADER)
    if shared and hmac.compare_digest(shared, secret):
        return True

    raise HTTPException(
        status_code=401,
        detail={"success": False, "error": "auth_error", "detail": "Invalid or missing authentication"},
    )
