"""HMAC-SHA256 verification of GitHub webhook signatures."""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    """Return the ``sha256=<hex>`` signature GitHub sends for *body*."""
    digest = hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Check that *signature* authenticates the raw request *body*.

    With no secret configured every delivery is accepted, signature or not.
    Otherwise the header must carry the ``sha256=`` prefix and the digest is
    compared in constant time.
    """
    if not secret:
        return True
    if not signature or not signature.startswith(SIGNATURE_PREFIX):
        return False
    return hmac.compare_digest(
        compute_signature(body, secret).encode("ascii"),
        signature.encode("utf-8"),
    )
