# MIT License
# Copyright (c) 2025 Hashborn

import logging
from dataclasses import dataclass

from ..protocol.config.params import CURRENT_NETWORK, NetworkConfig
from ..protocol.crypto import ed25519, keys as secp256k1
from ..protocol.types.common import KeyGenerationError, PreconditionError, SigningError
from ..protocol.types.pubkey import AminoPubKey
from ..protocol.types.validator import GenesisValidator

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ValidatorPrivKey:
    """The two keys of one validator: consensus identity and delegator account."""
    val: bytes          # ed25519 seed
    delegator: bytes    # secp256k1 private key

    @classmethod
    def generate(cls) -> "ValidatorPrivKey":
        try:
            val = ed25519.generate_private_key()
            delegator = secp256k1.generate_private_key()
            # Reject keys that cannot produce a public key
            ed25519.public_key_from_private(val)
            secp256k1.public_key_from_private(delegator)
        except (OSError, SigningError) as e:
            raise KeyGenerationError(f"validator key generation failed: {e}") from e
        return cls(val=val, delegator=delegator)

    @classmethod
    def from_secrets(cls, val_secret: bytes, del_secret: bytes) -> "ValidatorPrivKey":
        """Deterministic keys for fixtures."""
        return cls(
            val=ed25519.private_key_from_secret(val_secret),
            delegator=secp256k1.private_key_from_secret(del_secret),
        )

    @property
    def val_pub_key(self) -> bytes:
        return ed25519.public_key_from_private(self.val)

    @property
    def del_pub_key(self) -> bytes:
        return secp256k1.public_key_from_private(self.delegator)

    def __repr__(self) -> str:
        return f"ValidatorPrivKey(val_pub={self.val_pub_key.hex()[:16]}...)"

class ValidatorPrivKeys(tuple):

    def __new__(cls, keys=()):
        return super().__new__(cls, tuple(keys))

    @classmethod
    def generate(cls, n: int) -> "ValidatorPrivKeys":
        """n independent key pairs from the system random source."""
        if n < 1:
            raise PreconditionError(f"need at least one validator, got {n}")
        keys = cls(ValidatorPrivKey.generate() for _ in range(n))
        logger.debug(f"Generated {n} validator key pairs")
        return keys

    def comet_genesis_validators(self, config: NetworkConfig = CURRENT_NETWORK) -> "CometGenesisValidators":
        from .validators import CometGenesisValidator, CometGenesisValidators

        cgv = []
        for i, pk in enumerate(self):
            pub_key = pk.val_pub_key
            cgv.append(CometGenesisValidator(
                v=GenesisValidator(
                    address=ed25519.address_from_pubkey(pub_key).hex().upper(),
                    pub_key=AminoPubKey.ed25519(pub_key),
                    power=config.genesis_voting_power,
                    name=f"val-{i}",
                ),
                pk=pk,
            ))
        return CometGenesisValidators(cgv)
