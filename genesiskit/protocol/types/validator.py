from decimal import Decimal

from pydantic import BaseModel, Field

from .coins import Dec, IntStr
from .common import BondStatus
from .pubkey import AminoPubKey, AnyPubKey

ZERO_TIME = "1970-01-01T00:00:00Z"

class GenesisValidator(BaseModel):
    """Consensus-layer validator entry of the genesis document."""
    address: str         # Upper-case hex of the 20-byte consensus address
    pub_key: AminoPubKey
    power: IntStr        # Voting power
    name: str = ""

class Description(BaseModel):
    moniker: str = ""
    identity: str = ""
    website: str = ""
    security_contact: str = ""
    details: str = ""

class CommissionRates(BaseModel):
    rate: Dec = Decimal(0)
    max_rate: Dec = Decimal(0)
    max_change_rate: Dec = Decimal(0)

class Commission(BaseModel):
    commission_rates: CommissionRates = Field(default_factory=CommissionRates)
    update_time: str = ZERO_TIME

class Validator(BaseModel):
    """Staking-layer validator record."""
    operator_address: str                # Bech32 (cosmosvaloper...)
    consensus_pubkey: AnyPubKey
    jailed: bool = False
    status: BondStatus = BondStatus.BONDED
    tokens: IntStr
    delegator_shares: Dec
    description: Description = Field(default_factory=Description)
    unbonding_height: IntStr = 0
    unbonding_time: str = ZERO_TIME
    commission: Commission = Field(default_factory=Commission)
    min_self_delegation: IntStr = 0
