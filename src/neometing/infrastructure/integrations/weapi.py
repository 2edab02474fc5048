"""NetEase "weapi" request envelope.

Hey future me - this MUST match the official web client bit for bit, otherwise
the upstream answers with empty bodies or error codes. The scheme:

1. Pick a 16 character secret from a 62 character alphabet (random byte % 62).
2. AES-128-CBC(plaintext, PRESET_KEY, IV) → base64
3. AES-128-CBC(step 2, secret, IV) → base64 → ``params``
4. reversed(secret), zero-padded on the left to the modulus size,
   raw RSA with the public key below → hex → ``encSecKey``

The modulo-62 bias in step 1 is what the upstream client does. Don't "fix" it.
Key, IV and public key are public constants shipped in the upstream web client.
"""

from __future__ import annotations

import base64
import logging
import secrets
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.serialization import load_pem_public_key

logger = logging.getLogger(__name__)

BASE62 = b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
PRESET_KEY = b"0CoJUm6Qyw8W8jud"
IV = b"0102030405060708"
SECRET_KEY_SIZE = 16

NETEASE_PUBLIC_KEY = b"""-----BEGIN PUBLIC KEY-----
MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQDgtQn2JZ34ZC28NWYpAUd98iZ37BUrX/aKzmFbt7clFSs6sXqHauqKWqdtLkF2KexO40H1YTX8z2lSgBBOAxLsvaklV8k4cBFK9snQXE9/DDaFt6Rr7iVZMldczhC0JNgTz+SHXT6CBHuX3e9SdB1Ua44oncaTWz7OBGLbCiK45wIDAQAB
-----END PUBLIC KEY-----
"""


class EncodeStage(str, Enum):
    """Step of the envelope construction that failed."""

    GEN_RANDOM_NUMBER = "gen_random_number"
    ENCODE_SOURCE = "encode_source"
    ENCODE_DATA = "encode_data"
    ENCODE_REV_STR = "encode_rev_str"
    IMPORT_PUB_KEY = "import_pub_key"
    ENCODE_KEY = "encode_key"


class WeapiEncodeError(Exception):
    """Building the envelope failed. Never transient, so never retried."""

    def __init__(self, stage: EncodeStage, message: str) -> None:
        super().__init__(f"{stage.value}: {message}")
        self.stage = stage
        self.message = message


@dataclass(frozen=True)
class SignedEnvelope:
    """The only thing ever sent as a weapi request body."""

    params: str
    enc_sec_key: str

    def to_form(self) -> dict[str, str]:
        return {"params": self.params, "encSecKey": self.enc_sec_key}


@lru_cache(maxsize=1)
def _public_key() -> RSAPublicKey:
    try:
        key = load_pem_public_key(NETEASE_PUBLIC_KEY)
    except ValueError as e:
        raise WeapiEncodeError(EncodeStage.IMPORT_PUB_KEY, str(e)) from e
    if not isinstance(key, RSAPublicKey):
        raise WeapiEncodeError(EncodeStage.IMPORT_PUB_KEY, "bundled key is not RSA")
    return key


def _aes_cbc(data: bytes, key: bytes) -> bytes:
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(data) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(IV)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def _rsa_no_padding(data: bytes, key: RSAPublicKey) -> bytes:
    # cryptography refuses unpadded RSA, the upstream requires it: textbook m^e mod n.
    numbers = key.public_numbers()
    size = (key.key_size + 7) // 8
    message = int.from_bytes(data, "big")
    if message >= numbers.n:
        raise ValueError("message representative out of range")
    return pow(message, numbers.e, numbers.n).to_bytes(size, "big")


class WeapiEncoder:
    """Builds signed envelopes for NetEase weapi endpoints."""

    @staticmethod
    def generate_secret_key() -> bytes:
        """Return a fresh 16 byte key restricted to the base62 alphabet."""
        try:
            raw = secrets.token_bytes(SECRET_KEY_SIZE)
        except (OSError, NotImplementedError) as e:
            raise WeapiEncodeError(EncodeStage.GEN_RANDOM_NUMBER, str(e)) from e
        return bytes(BASE62[b % len(BASE62)] for b in raw)

    @classmethod
    def encode(cls, plaintext: str) -> SignedEnvelope:
        """Encrypt a JSON payload into a weapi envelope.

        Args:
            plaintext: Serialized request payload

        Returns:
            SignedEnvelope with base64 params and hex encSecKey

        Raises:
            WeapiEncodeError: If any step of the construction fails
        """
        secret = cls.generate_secret_key()

        try:
            source = base64.b64encode(_aes_cbc(plaintext.encode("utf-8"), PRESET_KEY))
        except ValueError as e:
            raise WeapiEncodeError(EncodeStage.ENCODE_SOURCE, str(e)) from e

        try:
            params = base64.b64encode(_aes_cbc(source, secret)).decode("ascii")
        except ValueError as e:
            raise WeapiEncodeError(EncodeStage.ENCODE_DATA, str(e)) from e

        try:
            reversed_secret = secret[::-1].decode("utf-8")
        except UnicodeDecodeError as e:
            raise WeapiEncodeError(EncodeStage.ENCODE_REV_STR, str(e)) from e

        key = _public_key()
        size = (key.key_size + 7) // 8
        block = reversed_secret.encode("utf-8").rjust(size, b"\x00")
        try:
            enc_sec_key = _rsa_no_padding(block, key).hex()
        except ValueError as e:
            raise WeapiEncodeError(EncodeStage.ENCODE_KEY, str(e)) from e

        return SignedEnvelope(params=params, enc_sec_key=enc_sec_key)
