import hashlib
import hmac
from typing import Mapping, Optional

SIGNATURE_HEADER = "x-hub-signature-256"


class WebhookVerifier:
    def __init__(self, secret: str):
        self.secret = secret

    def verify(self, headers: Mapping[str, str], payload: bytes) -> bool:
        """Verify the signature header of a webhook delivery against its raw body."""
        return self.verify_webhook_signature(payload, get_signature_header(headers), self.secret)

    @staticmethod
    def verify_webhook_signature(payload: bytes, signature: Optional[str], secret: str) -> bool:
        """Verify GitHub webhook signature (``sha256=<hex>``)."""
        if not signature:
            return False

        sha_name, sep, _ = signature.partition("=")
        if not sep or sha_name != "sha256":
            return False

        expected = "sha256=" + hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
        return hmac.compare_digest(expected.encode(), signature.encode())


def get_signature_header(headers: Mapping[str, str]) -> Optional[str]:
    """Case-insensitive lookup of the signature header."""
    value = headers.get(SIGNATURE_HEADER)
    if value is not None:
        return value
    for key, val in headers.items():
        if key.lower() == SIGNATURE_HEADER:
            return val
    return None


def verify(headers: Mapping[str, str], payload: bytes, secret: str) -> bool:
    return WebhookVerifier(secret).verify(headers, payload)
