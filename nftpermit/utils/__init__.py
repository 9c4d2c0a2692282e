"""Small byte/hex/hash helpers shared by the encoder, recovery and CLI."""

from .hash import from_hex, keccak_256, to_hex

__all__ = ["keccak_256", "to_hex", "from_hex"]
