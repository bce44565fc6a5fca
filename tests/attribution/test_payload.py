"""Tests for opaque payload encoders."""

import pytest

from shapleyad.attribution.payload import (
    Base64PayloadEncoder,
    PassthroughPayloadEncoder,
    PayloadEncoder,
)


class TestBase64PayloadEncoder:

    def test_prefix_and_base64(self):
        blob = Base64PayloadEncoder().obscure('{"campaign":"x"}')
        assert blob == "FHE-eyJjYW1wYWlnbiI6IngifQ=="

    def test_reveal_inverts_obscure(self):
        enc = Base64PayloadEncoder(prefix="ENC:")
        text = '{"campaign":"Ünïcødé"}'
        assert enc.reveal(enc.obscure(text)) == text

    def test_reveal_rejects_foreign_prefix(self):
        with pytest.raises(ValueError, match="does not start"):
            Base64PayloadEncoder().reveal("XYZ-abc")

    def test_reveal_rejects_invalid_base64(self):
        with pytest.raises(ValueError):
            Base64PayloadEncoder().reveal("FHE-***")


class TestPayloadEncoderProtocol:

    @pytest.mark.parametrize("encoder", [Base64PayloadEncoder(), PassthroughPayloadEncoder()])
    def test_reference_encoders_satisfy_protocol(self, encoder):
        assert isinstance(encoder, PayloadEncoder)

    def test_passthrough_is_identity(self):
        assert PassthroughPayloadEncoder().obscure("plain") == "plain"
