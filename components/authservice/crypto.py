from __future__ import annotations
import base64, json, hmac, hashlib, secrets, time, uuid
from typing import Any, Callable, Dict, Optional

from .errors import TokenValidationError

Clock = Callable[[], float]


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")

def _unb64url(s: str) -> bytes:
    pad = '=' * (-len(s) % 4)
    return base64.urlsafe_b64decode(s + pad)


def generate_salt(nbytes: int = 16) -> str:
    return secrets.token_hex(nbytes)


class PasswordHasher:
    """
    PBKDF2-HMAC-SHA256 over (password, salt). Output is a 64-char lowercase
    hex digest; no process-local key, so digests survive restarts.
    """
    def __init__(self, iterations: int = 100_000):
        self.iterations = iterations

    def hash(self, password: str, salt: str) -> str:
        dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), self.iterations, dklen=32)
        return dk.hex()

    def verify(self, password: str, salt: str, digest: str) -> bool:
        return hmac.compare_digest(self.hash(password, salt), digest or "")


class HS256TokenSigner:
    """
    HS256 JWT issuer/validator bound to one issuer and audience.
    Lifecycle: issued -> valid until `exp` -> expired. There is no revocation.
    """
    def __init__(
        self,
        secret: str,
        *,
        issuer: str,
        audience: str,
        ttl_seconds: int = 3600,
        clock: Optional[Clock] = None,
    ):
        if not secret:
            raise ValueError("HS256TokenSigner requires non-empty secret")
        self._secret = secret.encode("utf-8")
        self.issuer = issuer
        self.audience = audience
        self.ttl_seconds = ttl_seconds
        self._now = clock or time.time

    def issue(self, subject: str) -> str:
        now = int(self._now())
        claims: Dict[str, Any] = {
            "sub": subject,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + self.ttl_seconds,
            "jti": uuid.uuid4().hex,
        }
        return self.sign(claims)

    def sign(self, claims: Dict[str, Any]) -> str:
        header_b64 = _b64url(json.dumps({"alg": "HS256", "typ": "JWT"}, separators=(",",":")).encode("utf-8"))
        payload_b64 = _b64url(json.dumps(claims, separators=(",",":")).encode("utf-8"))
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        sig = hmac.new(self._secret, signing_input, hashlib.sha256).digest()
        return f"{header_b64}.{payload_b64}.{_b64url(sig)}"

    def verify(self, token: str, *, issuer: Optional[str] = None, audience: Optional[str] = None) -> Dict[str, Any]:
        """Check signature, issuer, audience and expiry. Raises TokenValidationError on the first failure."""
        try:
            header_b64, payload_b64, sig_b64 = token.split(".")
        except (AttributeError, ValueError):
            raise TokenValidationError("Invalid token format")
        try:
            signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
            given_sig = _unb64url(sig_b64)
        except ValueError:
            raise TokenValidationError("Invalid token encoding")
        expected_sig = hmac.new(self._secret, signing_input, hashlib.sha256).digest()
        if not hmac.compare_digest(expected_sig, given_sig):
            raise TokenValidationError("Signature mismatch")
        # header and claims are only decoded once the signature is trusted
        try:
            header = json.loads(_unb64url(header_b64).decode("utf-8"))
            payload = json.loads(_unb64url(payload_b64).decode("utf-8"))
        except (ValueError, RecursionError):
            raise TokenValidationError("Invalid token encoding")
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            raise TokenValidationError("Unsupported algorithm")
        if not isinstance(payload, dict):
            raise TokenValidationError("Invalid claims")

        if payload.get("iss") != (issuer or self.issuer):
            raise TokenValidationError("Issuer mismatch")
        if payload.get("aud") != (audience or self.audience):
            raise TokenValidationError("Audience mismatch")
        if "exp" not in payload:
            raise TokenValidationError("Missing exp claim")
        try:
            exp = int(payload["exp"])
        except (TypeError, ValueError):
            raise TokenValidationError("Invalid exp claim")
        if int(self._now()) >= exp:
            raise TokenValidationError("Token expired")
        return payload
