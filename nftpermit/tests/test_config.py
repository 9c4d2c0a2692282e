from __future__ import annotations

import pytest
from eth_utils import to_checksum_address

from nftpermit.config import DEFAULT_CHAIN_ID, load_config
from nftpermit.errors import ConfigError
from nftpermit.types import ZERO_IDENTITY


def test_defaults_from_empty_env():
    cfg = load_config({})
    d = cfg.domain_settings
    assert (d.name, d.symbol, d.version) == ("Mock NFT", "mNft", "1")
    assert d.chain_id == DEFAULT_CHAIN_ID
    assert d.verifying_contract == ZERO_IDENTITY
    assert cfg.logging.level == "INFO"
    assert not cfg.logging.json


def test_env_values_are_parsed():
    env = {
        "NFTPERMIT_NAME": "Env NFT",
        "NFTPERMIT_CHAIN_ID": "0x89",
        "NFTPERMIT_VERIFYING_CONTRACT": "0x" + "ab" * 20,
        "NFTPERMIT_LOG_LEVEL": "debug",
        "NFTPERMIT_LOG_FORMAT": "JSON",
    }
    cfg = load_config(env)
    assert cfg.domain_settings.name == "Env NFT"
    assert cfg.domain_settings.chain_id == 137
    assert cfg.domain_settings.verifying_contract == to_checksum_address("0x" + "ab" * 20)
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.json


def test_overrides_win_over_env():
    cfg = load_config({"NFTPERMIT_CHAIN_ID": "10"}, overrides={"chain_id": 1})
    assert cfg.domain_settings.chain_id == 1
    assert cfg.domain().chain_id == 1


def test_empty_env_value_falls_back_to_default():
    assert load_config({"NFTPERMIT_NAME": ""}).domain_settings.name == "Mock NFT"


@pytest.mark.parametrize(
    "env",
    [
        {"NFTPERMIT_CHAIN_ID": "mainnet"},
        {"NFTPERMIT_CHAIN_ID": "-1"},
        {"NFTPERMIT_VERIFYING_CONTRACT": "0x1234"},
        {"NFTPERMIT_LOG_LEVEL": "LOUD"},
        {"NFTPERMIT_LOG_FORMAT": "xml"},
    ],
)
def test_invalid_values_raise(env):
    with pytest.raises(ConfigError):
        load_config(env)


def test_unknown_override_rejected():
    with pytest.raises(ConfigError):
        load_config({}, overrides={"colour": "blue"})


def test_to_dict_roundtrips_fields():
    d = load_config({}).to_dict()
    assert d["domain_settings"]["name"] == "Mock NFT"
    assert d["logging"] == {"level": "INFO", "format": "text"}
