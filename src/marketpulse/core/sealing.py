"""
Sealed Values for Confidential Survey Answers.

Provides the opaque value capability layer the ledger seals every
categorical answer through. A sealed value is a handle plus an access
list; its contents are AES-256-GCM ciphertext that the survey core never
opens, compares or branches on.

Design Principles:
1. Range checks happen on plaintext before sealing
2. Access is granted per principal, per value
3. An access list is frozen once issued
4. Opening a value is reserved for external collaborators
"""

import base64
import hashlib
import secrets
from functools import lru_cache
from typing import Optional

import structlog
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from marketpulse.core.access import Principal
from marketpulse.core.config import settings
from marketpulse.core.exceptions import AccessDeniedError, SealingError

logger = structlog.get_logger(__name__)

NONCE_SIZE = 12


class SealedValue:
    """
    Opaque sealed answer.

    Only the handle and bit width are visible. Equality, hashing and
    truthiness are unavailable so callers cannot branch on contents.
    """

    __slots__ = ("handle", "width", "_envelope", "_grantees", "_frozen")

    def __init__(self, handle: str, width: int, envelope: bytes):
        self.handle = handle
        self.width = width
        self._envelope = envelope
        self._grantees: set[Principal] = set()
        self._frozen = False

    @property
    def grantees(self) -> frozenset[Principal]:
        """Principals currently holding a capability on this value."""
        return frozenset(self._grantees)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def is_allowed(self, principal: Principal) -> bool:
        return principal in self._grantees

    def __eq__(self, other: object) -> bool:
        raise TypeError("Sealed values cannot be compared")

    __hash__ = None  # type: ignore[assignment]

    def __bool__(self) -> bool:
        raise TypeError("Sealed values have no truth value")

    def __repr__(self) -> str:
        return f"<SealedValue handle={self.handle[:12]} width={self.width}>"


class SealingService:
    """
    AES-256-GCM sealing with per-value capability grants.

    Uses a 256-bit key from either:
    - The SEAL_KEY setting (staging/production)
    - An explicit key argument (tests, embedding applications)
    - A generated key (development/test only, not persistent)
    """

    def __init__(
        self,
        seal_key: Optional[bytes] = None,
        self_principal: Optional[Principal] = None,
    ):
        """
        Initialize with sealing key.

        Args:
            seal_key: 32-byte AES key. If None, loads from settings.
            self_principal: Principal that receives self-access grants.
        """
        key = seal_key or self._load_key()
        if len(key) != 32:
            raise SealingError(f"Seal key must be 32 bytes, got {len(key)}")
        self._aesgcm = AESGCM(key)
        self.self_principal = self_principal or settings.STORAGE_PRINCIPAL

        logger.info("sealing_service_initialized", self_principal=self.self_principal)

    def _load_key(self) -> bytes:
        """Load sealing key from settings, or generate one outside production."""
        if settings.SEAL_KEY:
            return base64.b64decode(settings.SEAL_KEY)

        if settings.is_production_like:
            logger.error(
                "seal_key_required_in_production",
                app_env=settings.APP_ENV,
                message="SEAL_KEY must be set in production/staging",
            )
            raise SealingError("SEAL_KEY must be configured in production/staging")

        logger.warning(
            "no_seal_key_configured",
            app_env=settings.APP_ENV,
            message="Using an ephemeral seal key; sealed values will not survive a restart",
        )
        return secrets.token_bytes(32)

    def seal(self, plaintext: int, width: int = 8) -> SealedValue:
        """
        Seal an unsigned integer into an opaque value.

        Args:
            plaintext: Value to seal, must fit in ``width`` bits
            width: Bit width of the sealed value (multiple of 8)

        Returns:
            SealedValue with an empty access list
        """
        if width <= 0 or width % 8:
            raise SealingError(f"Unsupported sealed width: {width}")
        if not 0 <= plaintext < 2**width:
            raise SealingError(f"Plaintext does not fit in {width} bits")

        nonce = secrets.token_bytes(NONCE_SIZE)
        ciphertext = self._aesgcm.encrypt(
            nonce, plaintext.to_bytes(width // 8, "big"), None
        )
        envelope = nonce + ciphertext
        handle = hashlib.sha256(envelope).hexdigest()

        return SealedValue(handle=handle, width=width, envelope=envelope)

    def grant_access(self, value: SealedValue, principal: Principal) -> None:
        """Grant a principal the capability to operate on a sealed value."""
        if value.is_frozen:
            raise SealingError(f"Access list for {value.handle[:12]} is frozen")
        value._grantees.add(principal)

    def grant_self_access(self, value: SealedValue) -> None:
        """Grant the storage owner the capability to operate on a sealed value."""
        self.grant_access(value, self.self_principal)

    def freeze(self, value: SealedValue) -> None:
        """Freeze the access list; no further grants are accepted."""
        value._frozen = True

    def reveal(self, value: SealedValue, principal: Principal) -> int:
        """
        Open a sealed value for a principal holding a capability on it.

        This is the entry point for external aggregation engines. The
        survey core itself never calls it.
        """
        if not value.is_allowed(principal):
            logger.warning(
                "sealed_value_access_denied",
                handle=value.handle[:12],
                principal=principal,
            )
            raise AccessDeniedError(f"{principal} holds no capability on {value.handle[:12]}")

        nonce, ciphertext = value._envelope[:NONCE_SIZE], value._envelope[NONCE_SIZE:]
        try:
            plaintext = self._aesgcm.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            logger.error("sealed_value_open_failed", handle=value.handle[:12])
            raise SealingError("Sealed value was not produced by this key") from e

        return int.from_bytes(plaintext, "big")


@lru_cache()
def get_sealing_service() -> SealingService:
    """Get the singleton SealingService instance."""
    return SealingService()


def generate_seal_key() -> str:
    """
    Generate a new base64-encoded 256-bit sealing key.

    Use this to generate a new key for SEAL_KEY.
    """
    key = secrets.token_bytes(32)
    return base64.b64encode(key).decode("ascii")
