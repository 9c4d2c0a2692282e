"""
nftpermit.config — deployment identity and logging knobs.

The EIP-712 domain a token signs under is fixed at creation; this module resolves
it (and the logging setup used by the CLI) from the environment, with explicit
overrides taking precedence. Safe defaults match a local devnet deployment.

Environment variables (all optional):
  NFTPERMIT_NAME                 -> token / domain name        (default: "Mock NFT")
  NFTPERMIT_SYMBOL               -> token symbol               (default: "mNft")
  NFTPERMIT_VERSION              -> domain version             (default: "1")
  NFTPERMIT_CHAIN_ID             -> chain id, decimal or 0x-hex (default: 1337)
  NFTPERMIT_VERIFYING_CONTRACT   -> 20-byte hex address        (default: zero address)
  NFTPERMIT_LOG_LEVEL            -> DEBUG/INFO/WARNING/ERROR   (default: INFO)
  NFTPERMIT_LOG_FORMAT           -> json | text                (default: text)

Programmatic usage:
    from nftpermit.config import load_config
    cfg = load_config()
    domain = cfg.domain()
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .errors import ConfigError
from .types.domain import DomainContext
from .types.identity import ZERO_IDENTITY, to_identity

DEFAULT_NAME = "Mock NFT"
DEFAULT_SYMBOL = "mNft"
DEFAULT_VERSION = "1"
DEFAULT_CHAIN_ID = 1337

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_LOG_FORMATS = {"json", "text"}


# ----------------------------- dataclasses ---------------------------------


@dataclass(frozen=True)
class DomainSettings:
    name: str = DEFAULT_NAME
    symbol: str = DEFAULT_SYMBOL
    version: str = DEFAULT_VERSION
    chain_id: int = DEFAULT_CHAIN_ID
    verifying_contract: str = ZERO_IDENTITY


@dataclass(frozen=True)
class LogSettings:
    level: str = "INFO"
    format: str = "text"

    @property
    def json(self) -> bool:
        return self.format == "json"


@dataclass(frozen=True)
class PermitConfig:
    domain_settings: DomainSettings
    logging: LogSettings

    def domain(self) -> DomainContext:
        d = self.domain_settings
        return DomainContext(
            name=d.name,
            version=d.version,
            chain_id=d.chain_id,
            verifying_contract=d.verifying_contract,
        )

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# ----------------------------- helpers -------------------------------------


def _parse_int(name: str, value: Union[str, int]) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be int, got bool")
    if isinstance(value, int):
        out = value
    else:
        try:
            out = int(str(value).strip(), 0)
        except ValueError as e:
            raise ConfigError(f"{name} must be int, got {value!r}") from e
    if out < 0:
        raise ConfigError(f"{name} must be >= 0")
    return out


def _parse_identity(name: str, value: Any) -> str:
    try:
        return to_identity(value)
    except ValueError as e:
        raise ConfigError(f"{name}: {e}") from e


def _pick(
    key: str,
    env_key: str,
    env: Mapping[str, str],
    overrides: Mapping[str, Any],
    default: Any,
) -> Any:
    if key in overrides:
        return overrides[key]
    v = env.get(env_key)
    if v is None or v == "":
        return default
    return v


# ------------------------------ loader --------------------------------------


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> PermitConfig:
    """
    Build a PermitConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys support:
          'name', 'symbol', 'version', 'chain_id', 'verifying_contract',
          'log_level', 'log_format'

    Raises:
        ConfigError on any invalid value.
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    unknown = set(overrides) - {
        "name",
        "symbol",
        "version",
        "chain_id",
        "verifying_contract",
        "log_level",
        "log_format",
    }
    if unknown:
        raise ConfigError(f"unknown config override(s): {sorted(unknown)}")

    name = str(_pick("name", "NFTPERMIT_NAME", env, overrides, DEFAULT_NAME))
    if not name:
        raise ConfigError("name must be non-empty")

    domain_settings = DomainSettings(
        name=name,
        symbol=str(_pick("symbol", "NFTPERMIT_SYMBOL", env, overrides, DEFAULT_SYMBOL)),
        version=str(_pick("version", "NFTPERMIT_VERSION", env, overrides, DEFAULT_VERSION)),
        chain_id=_parse_int(
            "chain_id",
            _pick("chain_id", "NFTPERMIT_CHAIN_ID", env, overrides, DEFAULT_CHAIN_ID),
        ),
        verifying_contract=_parse_identity(
            "verifying_contract",
            _pick(
                "verifying_contract",
                "NFTPERMIT_VERIFYING_CONTRACT",
                env,
                overrides,
                ZERO_IDENTITY,
            ),
        ),
    )

    level = str(_pick("log_level", "NFTPERMIT_LOG_LEVEL", env, overrides, "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {level!r}")
    fmt = str(_pick("log_format", "NFTPERMIT_LOG_FORMAT", env, overrides, "text")).lower()
    if fmt not in _LOG_FORMATS:
        raise ConfigError(f"log_format must be 'json' or 'text', got {fmt!r}")

    return PermitConfig(domain_settings=domain_settings, logging=LogSettings(level=level, format=fmt))


__all__ = ["DomainSettings", "LogSettings", "PermitConfig", "load_config"]
