# MIT License
# Copyright (c) 2025 Hashborn

import base64

from pydantic import BaseModel, ConfigDict, Field

ED25519_TYPE_URL = "/cosmos.crypto.ed25519.PubKey"
SECP256K1_TYPE_URL = "/cosmos.crypto.secp256k1.PubKey"
ED25519_AMINO_NAME = "tendermint/PubKeyEd25519"

class AnyPubKey(BaseModel):
    """Public key in a self-describing ``@type`` envelope."""
    model_config = ConfigDict(populate_by_name=True)

    type_url: str = Field(alias="@type")
    key: str                # base64

    @classmethod
    def ed25519(cls, pub_bytes: bytes) -> "AnyPubKey":
        return cls(type_url=ED25519_TYPE_URL, key=base64.b64encode(pub_bytes).decode())

    @classmethod
    def secp256k1(cls, pub_bytes: bytes) -> "AnyPubKey":
        return cls(type_url=SECP256K1_TYPE_URL, key=base64.b64encode(pub_bytes).decode())

    def raw(self) -> bytes:
        return base64.b64decode(self.key)

class AminoPubKey(BaseModel):
    """Consensus-layer encoding: ``{"type": ..., "value": base64}``."""
    type: str = ED25519_AMINO_NAME
    value: str

    @classmethod
    def ed25519(cls, pub_bytes: bytes) -> "AminoPubKey":
        return cls(value=base64.b64encode(pub_bytes).decode())

    def raw(self) -> bytes:
        return base64.b64decode(self.value)
