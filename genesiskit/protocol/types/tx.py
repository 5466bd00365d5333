# MIT License
# Copyright (c) 2025 Hashborn

import base64
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..codec import canonical_json
from ..crypto.addresses import decode_address
from .coins import Coin, IntStr
from .common import InvalidBalanceError, SignMode, ValidationError
from .pubkey import ED25519_TYPE_URL, AnyPubKey
from .validator import CommissionRates, Description

MSG_CREATE_VALIDATOR_TYPE_URL = "/cosmos.staking.v1beta1.MsgCreateValidator"

class MsgCreateValidator(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type_url: str = Field(default=MSG_CREATE_VALIDATOR_TYPE_URL, alias="@type")
    description: Description
    commission: CommissionRates
    min_self_delegation: IntStr
    delegator_address: str = ""
    validator_address: str
    pubkey: AnyPubKey
    value: Coin

    def validate_basic(self, acc_prefix: str, val_prefix: str) -> None:
        """Stateless checks. Raises ValidationError."""
        if not self.delegator_address:
            raise ValidationError("empty delegator address")
        try:
            del_hrp, _ = decode_address(self.delegator_address)
            val_hrp, _ = decode_address(self.validator_address)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if del_hrp != acc_prefix:
            raise ValidationError(f"delegator address prefix {del_hrp!r}, expected {acc_prefix!r}")
        if val_hrp != val_prefix:
            raise ValidationError(f"validator address prefix {val_hrp!r}, expected {val_prefix!r}")

        if self.pubkey.type_url != ED25519_TYPE_URL:
            raise ValidationError(f"consensus pubkey must be ed25519, got {self.pubkey.type_url}")

        try:
            self.value.validate_coin()
        except InvalidBalanceError as e:
            raise ValidationError(str(e)) from e
        if self.value.amount <= 0:
            raise ValidationError("invalid delegation amount")

        if not self.description.moniker:
            raise ValidationError("empty description moniker")

        rates = self.commission
        if not (Decimal(0) <= rates.max_rate <= Decimal(1)):
            raise ValidationError("commission max rate must be within [0, 1]")
        if not (Decimal(0) <= rates.rate <= rates.max_rate):
            raise ValidationError("commission rate must be within [0, max rate]")
        if not (Decimal(0) <= rates.max_change_rate <= rates.max_rate):
            raise ValidationError("commission max change rate must be within [0, max rate]")

        if self.min_self_delegation <= 0:
            raise ValidationError("minimum self delegation must be a positive integer")
        if self.value.amount < self.min_self_delegation:
            raise ValidationError("self delegation below minimum")

class TxBody(BaseModel):
    messages: List[MsgCreateValidator] = Field(default_factory=list)
    memo: str = ""
    timeout_height: IntStr = 0
    extension_options: List[Dict[str, Any]] = Field(default_factory=list)
    non_critical_extension_options: List[Dict[str, Any]] = Field(default_factory=list)

class SingleModeInfo(BaseModel):
    mode: SignMode = SignMode.DIRECT

class ModeInfo(BaseModel):
    single: SingleModeInfo = Field(default_factory=SingleModeInfo)

class SignerInfo(BaseModel):
    public_key: AnyPubKey
    mode_info: ModeInfo = Field(default_factory=ModeInfo)
    sequence: IntStr = 0

class Fee(BaseModel):
    amount: List[Coin] = Field(default_factory=list)
    gas_limit: IntStr = 0
    payer: str = ""
    granter: str = ""

class AuthInfo(BaseModel):
    signer_infos: List[SignerInfo] = Field(default_factory=list)
    fee: Fee = Field(default_factory=Fee)

class Tx(BaseModel):
    body: TxBody = Field(default_factory=TxBody)
    auth_info: AuthInfo = Field(default_factory=AuthInfo)
    signatures: List[str] = Field(default_factory=list)   # base64

@dataclass
class SignatureV2:
    pub_key: bytes          # compressed secp256k1
    signature: bytes
    sign_mode: SignMode = SignMode.DIRECT
    sequence: int = 0

@dataclass
class SignerData:
    chain_id: str
    pub_key: bytes
    address: str
    # None only for genesis transactions
    account_number: Optional[int] = None
    sequence: Optional[int] = None

class TxBuilder:
    """Accumulates messages and signatures, then hands out the Tx."""

    def __init__(self):
        self._body = TxBody()
        self._auth_info = AuthInfo()
        self._signatures: List[str] = []

    def set_msgs(self, *msgs: MsgCreateValidator) -> None:
        self._body = self._body.model_copy(update={"messages": list(msgs)})

    def set_signatures(self, *sigs: SignatureV2) -> None:
        infos = [
            SignerInfo(
                public_key=AnyPubKey.secp256k1(sig.pub_key),
                mode_info=ModeInfo(single=SingleModeInfo(mode=sig.sign_mode)),
                sequence=sig.sequence,
            )
            for sig in sigs
        ]
        self._auth_info = self._auth_info.model_copy(update={"signer_infos": infos})
        self._signatures = [base64.b64encode(sig.signature).decode() for sig in sigs]

    def get_tx(self) -> Tx:
        return Tx(body=self._body, auth_info=self._auth_info, signatures=list(self._signatures))

def get_sign_bytes(mode: SignMode, signer_data: SignerData, tx: Tx, allow_missing_account: bool = False) -> bytes:
    """
    Deterministic bytes a signer commits to.

    The sign doc covers chain id, signer public key, sign mode and the
    tx body. Account number and sequence are bound when given; they may
    only be absent with allow_missing_account (genesis transactions).
    """
    if mode != SignMode.DIRECT:
        raise ValidationError(f"unsupported sign mode: {mode}")
    if not signer_data.chain_id:
        raise ValidationError("sign bytes require a chain id")

    doc: Dict[str, Any] = {
        "body": tx.body,
        "chain_id": signer_data.chain_id,
        "public_key": AnyPubKey.secp256k1(signer_data.pub_key),
        "sign_mode": mode.value,
    }

    missing = signer_data.account_number is None or signer_data.sequence is None
    if missing and not allow_missing_account:
        raise ValidationError("account number and sequence are required outside genesis")
    if signer_data.account_number is not None:
        doc["account_number"] = str(signer_data.account_number)
    if signer_data.sequence is not None:
        doc["sequence"] = str(signer_data.sequence)

    return canonical_json(doc)
