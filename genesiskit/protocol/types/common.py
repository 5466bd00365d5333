from enum import Enum

class BondStatus(str, Enum):
    UNSPECIFIED = "BOND_STATUS_UNSPECIFIED"
    UNBONDED = "BOND_STATUS_UNBONDED"
    UNBONDING = "BOND_STATUS_UNBONDING"
    BONDED = "BOND_STATUS_BONDED"

class SignMode(str, Enum):
    DIRECT = "SIGN_MODE_DIRECT"

class ProtocolError(Exception):
    pass

class ValidationError(ProtocolError):
    """A message failed its stateless self-consistency checks."""

class GenesisError(ProtocolError):
    pass

class PreconditionError(GenesisError):
    """The genesis pipeline was used in an order or shape it does not allow."""

class MalformedStateError(GenesisError):
    """Existing module state does not parse as that module's genesis state."""

class DuplicateAccountError(MalformedStateError):
    pass

class InvalidBalanceError(MalformedStateError):
    pass

class CryptoError(ProtocolError):
    pass

class KeyGenerationError(CryptoError):
    pass

class SigningError(CryptoError):
    pass

class StoreError(ProtocolError):
    pass
