"""
Card number protection: reversible encryption, blind index, display masking.

A raw card number ("1111 2222 3333 4444") is never stored in plaintext.
At creation time it takes two independent paths:

1. CIPHER (AES-256-GCM, key from PBKDF2)
   - Reversible: the stored ciphertext can be decrypted when the number is
     needed for display
   - Randomized: a fresh nonce per call, so two encryptions of the same
     number differ, which is why the ciphertext cannot serve as a lookup key
   - Authenticated: a modified or truncated ciphertext fails to decrypt
     instead of yielding garbage

2. BLIND INDEX (HMAC-SHA256)
   - Deterministic: equal card numbers always produce the same digest
   - Keyed: without the HMAC secret the digest cannot be brute-forced
     from the small space of valid card numbers
   - Used only for uniqueness checks, never decrypted

The two paths use separate secrets, so leaking one does not weaken the other.

3. MASKING
   - Pure formatting for display: "**** **** **** 4444"

Key material is derived once, when this module is imported, and is treated
as immutable process-wide state afterwards.
"""

import base64
import os

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from bankcards.config import settings
from bankcards.exceptions import CryptoUnavailableError, DataCorruptionError


# PBKDF2 parameters: SHA-1, 1024 iterations, 256-bit AES key.
# Changing any of these makes every stored ciphertext unreadable.
KDF_ITERATIONS = 1024
KEY_LENGTH = 32
NONCE_LENGTH = 16
TAG_LENGTH = 16

MASK_PREFIX = "**** **** **** "


# ---------------------------------------------------------------------------
# 1. Cipher
# ---------------------------------------------------------------------------

class CardNumberCipher:
    """
    Reversible symmetric encryption of raw card numbers.

    Ciphertext layout (hex-encoded so it fits a text column):

        nonce (16 bytes) || AES-GCM ciphertext || tag (16 bytes)
    """

    def __init__(self, password: str, salt: str):
        if not password or not salt:
            raise CryptoUnavailableError("Card encryption password and salt must be set")

        try:
            kdf = PBKDF2HMAC(
                algorithm=hashes.SHA1(),
                length=KEY_LENGTH,
                salt=salt.encode("utf-8"),
                iterations=KDF_ITERATIONS,
            )
            self._aesgcm = AESGCM(kdf.derive(password.encode("utf-8")))
        except (UnsupportedAlgorithm, ValueError) as e:
            raise CryptoUnavailableError(f"Failed to initialize card cipher: {e}") from e

    def encrypt(self, raw_card_number: str) -> str:
        """Encrypt a raw card number. Returns a hex string."""
        nonce = os.urandom(NONCE_LENGTH)
        ciphertext = self._aesgcm.encrypt(nonce, raw_card_number.encode("utf-8"), None)
        return (nonce + ciphertext).hex()

    def decrypt(self, encrypted_card_number: str) -> str:
        """
        Decrypt a ciphertext produced by encrypt().

        Raises:
            DataCorruptionError: If the value is not valid hex, is too short,
                fails authentication, or was encrypted with other secrets.
        """
        try:
            data = bytes.fromhex(encrypted_card_number)
        except (TypeError, ValueError) as e:
            raise DataCorruptionError("Card number ciphertext is not valid hex") from e

        if len(data) < NONCE_LENGTH + TAG_LENGTH:
            raise DataCorruptionError("Card number ciphertext is truncated")

        nonce, ciphertext = data[:NONCE_LENGTH], data[NONCE_LENGTH:]
        try:
            plaintext = self._aesgcm.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise DataCorruptionError("Card number ciphertext failed authentication") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DataCorruptionError("Card number plaintext is not valid UTF-8") from e


# ---------------------------------------------------------------------------
# 2. Blind index
# ---------------------------------------------------------------------------

class CardNumberHasher:
    """Deterministic keyed digest of a raw card number (base64 HMAC-SHA256)."""

    def __init__(self, secret_key: str):
        if not secret_key:
            raise CryptoUnavailableError("Card hash secret key must be set")
        self._key = secret_key.encode("utf-8")

    def hash(self, raw_card_number: str) -> str:
        try:
            mac = hmac.HMAC(self._key, hashes.SHA256())
            mac.update(raw_card_number.encode("utf-8"))
            digest = mac.finalize()
        except (UnsupportedAlgorithm, TypeError) as e:
            raise CryptoUnavailableError(f"Failed to compute HMAC: {e}") from e
        return base64.b64encode(digest).decode("ascii")


# ---------------------------------------------------------------------------
# 3. Masking
# ---------------------------------------------------------------------------

def mask_card_number(card_number: str | None) -> str | None:
    """
    Format a card number for display as "**** **** **** 1234".

    None, empty, and shorter-than-4 inputs are returned unchanged. That
    passthrough is kept for compatibility with existing callers; it is not
    a security control, and a 3-character value is shown as-is.
    """
    if card_number is None or len(card_number) < 4:
        return card_number
    return f"{MASK_PREFIX}{card_number[-4:]}"


# ---------------------------------------------------------------------------
# Process-wide instances
# ---------------------------------------------------------------------------

card_cipher = CardNumberCipher(
    settings.CARD_ENCRYPTION_PASSWORD,
    settings.CARD_ENCRYPTION_SALT,
)
card_hasher = CardNumberHasher(settings.CARD_HASH_SECRET_KEY)

