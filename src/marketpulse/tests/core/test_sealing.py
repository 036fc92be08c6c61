"""
Tests for Sealed Values.

Tests the capability layer including:
- Sealing and revealing
- Access grants and freezing
- Opaqueness of sealed values
- Key loading
"""

import base64
import secrets
from unittest.mock import patch

import pytest

from marketpulse.core.exceptions import AccessDeniedError, SealingError
from marketpulse.core.sealing import SealedValue, SealingService, generate_seal_key


@pytest.mark.unit
class TestSealingService:
    """Tests for SealingService sealing and reveal."""

    def test_seal_returns_opaque_value(self, sealing):
        """Test that sealing produces a handle and an empty access list."""
        value = sealing.seal(7, 8)

        assert isinstance(value, SealedValue)
        assert len(value.handle) == 64
        assert value.width == 8
        assert value.grantees == frozenset()

    def test_reveal_returns_original_for_grantee(self, sealing):
        """Test that a granted principal can open the value."""
        value = sealing.seal(9, 8)
        sealing.grant_access(value, "0xcreator")

        assert sealing.reveal(value, "0xcreator") == 9

    def test_same_plaintext_produces_different_handles(self, sealing):
        """Test that sealing is randomized by nonce."""
        first = sealing.seal(3, 8)
        second = sealing.seal(3, 8)

        assert first.handle != second.handle

    def test_reveal_without_grant_is_denied(self, sealing):
        """Test that principals outside the access list cannot open the value."""
        value = sealing.seal(4, 8)
        sealing.grant_self_access(value)

        with pytest.raises(AccessDeniedError):
            sealing.reveal(value, "0xparticipant")

    def test_grant_self_access_uses_storage_principal(self, sealing):
        """Test that self access goes to the configured storage principal."""
        value = sealing.seal(1, 8)
        sealing.grant_self_access(value)

        assert value.grantees == frozenset({"0xledger"})
        assert value.is_allowed("0xledger")

    def test_frozen_access_list_rejects_grants(self, sealing):
        """Test that no principal can be added once the list is frozen."""
        value = sealing.seal(1, 8)
        sealing.grant_self_access(value)
        sealing.grant_access(value, "0xcreator")
        sealing.freeze(value)

        with pytest.raises(SealingError):
            sealing.grant_access(value, "0xmallory")

        assert value.grantees == frozenset({"0xledger", "0xcreator"})

    def test_plaintext_must_fit_width(self, sealing):
        """Test that values wider than the sealed width are refused."""
        with pytest.raises(SealingError):
            sealing.seal(256, 8)
        with pytest.raises(SealingError):
            sealing.seal(-1, 8)

    def test_unsupported_width_rejected(self, sealing):
        with pytest.raises(SealingError):
            sealing.seal(1, 12)

    def test_wider_values_round_trip(self, sealing):
        value = sealing.seal(65535, 16)
        sealing.grant_access(value, "0xcreator")

        assert sealing.reveal(value, "0xcreator") == 65535

    def test_value_from_other_key_fails_to_open(self, sealing):
        """Test that a value sealed under another key cannot be opened."""
        other = SealingService(seal_key=secrets.token_bytes(32), self_principal="0xledger")
        value = other.seal(5, 8)
        other.grant_access(value, "0xcreator")

        with pytest.raises(SealingError):
            sealing.reveal(value, "0xcreator")


@pytest.mark.unit
class TestSealedValueOpaqueness:
    """Sealed values must not expose contents through Python operators."""

    def test_equality_unavailable(self, sealing):
        value = sealing.seal(2, 8)

        with pytest.raises(TypeError):
            value == value  # noqa: B015

    def test_truthiness_unavailable(self, sealing):
        value = sealing.seal(0, 8)

        with pytest.raises(TypeError):
            bool(value)

    def test_not_hashable(self, sealing):
        value = sealing.seal(2, 8)

        with pytest.raises(TypeError):
            hash(value)

    def test_repr_shows_handle_prefix_only(self, sealing):
        value = sealing.seal(6, 8)

        text = repr(value)
        assert value.handle[:12] in text
        assert value.handle not in text


@pytest.mark.unit
class TestSealKeyLoading:
    """Tests for key loading from settings."""

    def test_explicit_key_must_be_32_bytes(self):
        with pytest.raises(SealingError):
            SealingService(seal_key=b"short")

    def test_configured_key_is_used(self):
        key = secrets.token_bytes(32)
        with patch("marketpulse.core.sealing.settings") as mock_settings:
            mock_settings.SEAL_KEY = base64.b64encode(key).decode("ascii")
            mock_settings.STORAGE_PRINCIPAL = "0xledger"
            service = SealingService()

        explicit = SealingService(seal_key=key, self_principal="0xledger")
        value = service.seal(8, 8)
        service.grant_access(value, "0xcreator")

        assert explicit.reveal(value, "0xcreator") == 8

    def test_missing_key_generates_ephemeral_key_in_development(self):
        with patch("marketpulse.core.sealing.settings") as mock_settings:
            mock_settings.SEAL_KEY = None
            mock_settings.is_production_like = False
            mock_settings.APP_ENV = "development"
            mock_settings.STORAGE_PRINCIPAL = "0xledger"
            service = SealingService()

        assert service.self_principal == "0xledger"

    def test_missing_key_refused_in_production(self):
        with patch("marketpulse.core.sealing.settings") as mock_settings:
            mock_settings.SEAL_KEY = None
            mock_settings.is_production_like = True
            mock_settings.APP_ENV = "production"

            with pytest.raises(SealingError):
                SealingService()

    def test_generate_seal_key_is_valid_base64(self):
        key = generate_seal_key()

        assert len(base64.b64decode(key)) == 32
