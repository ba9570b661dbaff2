# tests/unit/test_codec.py
"""
Unit tests for the YAML codec: kind tag recognition and rejection of
anything that is not a saved server configuration.
"""

import logging

import pytest
import yaml

from hanlon.config.codec import SCHEMA_VERSION, YamlConfigCodec
from hanlon.config.server_config import ServerConfig
from hanlon.error_handling import InvalidConfigError


class TestYamlConfigCodec:

    def setup_method(self):
        self.codec = YamlConfigCodec()

    def test_encoded_document_is_tagged_yaml(self, registry):
        config = ServerConfig.from_defaults(registry.defaults())
        document = yaml.safe_load(self.codec.encode(config))
        assert document["noun"] == "config"
        assert document["version"] == SCHEMA_VERSION
        assert document["api_port"] == 8026
        assert list(document)[:2] == ["noun", "version"]

    def test_decode_restores_stored_fields(self, registry):
        config = ServerConfig.from_defaults(registry.defaults())
        config.set("persist_host", "db.example.com")
        decoded = self.codec.decode(self.codec.encode(config))
        assert isinstance(decoded, ServerConfig)
        assert decoded.to_dict() == config.to_dict()

    def test_decode_keeps_missing_fields_absent(self):
        decoded = self.codec.decode(b"noun: config\napi_port: 9026\n")
        assert decoded.keys() == {"noun", "api_port"}
        assert decoded.api_port == 9026

    def test_decode_ignores_unknown_keys(self):
        decoded = self.codec.decode(b"noun: config\nretired_setting: 1\nadmin_port: 1\n")
        assert decoded.keys() == {"noun", "admin_port"}

    @pytest.mark.parametrize(
        "payload",
        [
            b"noun: node\napi_port: 8026\n",  # another kind
            b"api_port: 8026\n",  # untagged partial mapping
            b"- noun\n- config\n",  # not a mapping
            b"just a string\n",
            b"",  # empty file
            b"noun: config\nversion: zero\n",
            b"noun: config\n1: one\n",
            b"noun: [config\n",  # malformed
            b"\xff\xfe\x00garbage",
        ],
    )
    def test_decode_rejects_non_config(self, payload):
        with pytest.raises(InvalidConfigError):
            self.codec.decode(payload)

    def test_encode_rejects_unrepresentable_values(self):
        config = ServerConfig({"persist_host": object()})
        with pytest.raises(InvalidConfigError):
            self.codec.encode(config)

    def test_decode_notes_unexpected_types_without_rejecting(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="hanlon.config.codec"):
            decoded = self.codec.decode(b"noun: config\napi_port: '8026'\n")
        assert decoded.api_port == "8026"
        assert "Field 'api_port' holds str, expected int" in caplog.text
