# ticketqr/services/codec.py
from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Union

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ticketqr.core.errors import DecodeError, MintFailure

_HKDF_INFO = b"ticketqr/qr-token/v1"


def derive_fernet_key(secret: Union[str, bytes]) -> bytes:
    """Return a Fernet key for ``secret``.

    A secret that already is a url-safe base64 32-byte key is used as-is;
    anything else (a passphrase from the environment) is stretched with HKDF.
    """
    raw = secret.encode("utf-8") if isinstance(secret, str) else secret
    if not raw:
        raise ValueError("secret key cannot be empty")
    try:
        if len(base64.urlsafe_b64decode(raw)) == 32 and len(raw) == 44:
            return raw
    except (binascii.Error, ValueError):
        pass
    hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=_HKDF_INFO)
    return base64.urlsafe_b64encode(hkdf.derive(raw))


def _check_keys(value: Any) -> None:
    # json.dumps converteria 1 -> "1" e o decode não devolveria o mesmo payload
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"object keys must be str, got {type(k).__name__}")
            _check_keys(v)
    elif isinstance(value, tuple):
        raise TypeError("tuples would come back as lists; pass a list")
    elif isinstance(value, list):
        for v in value:
            _check_keys(v)


def canonical_json(payload: Any) -> bytes:
    _check_keys(payload)
    return json.dumps(
        payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    ).encode("utf-8")


class TokenCodec:
    """Authenticated, reversible payload <-> opaque string transform.

    Fernet (AES-CBC + HMAC-SHA256) with a random IV per call, so encoding the
    same payload twice yields different strings. Any alteration of the token
    fails the MAC check.
    """

    def __init__(self, secret_key: Union[str, bytes]):
        self._fernet = Fernet(derive_fernet_key(secret_key))

    def encrypt_text(self, text: str) -> str:
        return self._fernet.encrypt(text.encode("utf-8")).decode("ascii")

    def encode(self, payload: Any) -> str:
        try:
            data = canonical_json(payload)
        except (TypeError, ValueError) as exc:
            raise MintFailure(f"payload is not JSON serializable: {exc}") from exc
        return self._fernet.encrypt(data).decode("ascii")

    def decode(self, token: str) -> Any:
        if not isinstance(token, (str, bytes)) or not token:
            raise DecodeError("token must be a non-empty string")
        try:
            raw = self._fernet.decrypt(token)
        except (InvalidToken, TypeError, ValueError) as exc:
            raise DecodeError("invalid or tampered token") from exc
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError("token plaintext is not JSON") from exc
