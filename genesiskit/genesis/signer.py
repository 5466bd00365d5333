# MIT License
# Copyright (c) 2025 Hashborn

"""
Gentx Signer

Produces the signed self-delegation ("create validator") transaction a
validator contributes to the genesis document.

Flow:
1. Build the create-validator message from the consensus validator and policy constants
2. Point its delegator at the account derived from the signing key
3. Validate the message
4. Wrap it in an unsigned tx
5. Compute sign bytes without account or sequence number (nothing exists on-chain yet)
6. Sign and attach the signature
"""

import base64
import binascii
import logging

from ..protocol.config.params import CURRENT_NETWORK, NetworkConfig
from ..protocol.crypto import keys as secp256k1
from ..protocol.crypto.addresses import address_from_pubkey, bech32ify
from ..protocol.types.coins import Coin
from ..protocol.types.common import PreconditionError, SignMode
from ..protocol.types.pubkey import AnyPubKey
from ..protocol.types.tx import (
    MsgCreateValidator, SignatureV2, SignerData, Tx, TxBuilder, get_sign_bytes,
)
from ..protocol.types.validator import CommissionRates, Description, GenesisValidator
from .validators import consensus_address_bytes

logger = logging.getLogger(__name__)

SIGN_MODE = SignMode.DIRECT


def new_msg_create_validator(
    validator: GenesisValidator,
    bond_amount: Coin,
    config: NetworkConfig = CURRENT_NETWORK,
) -> MsgCreateValidator:
    """Create-validator message with the fixed genesis commission policy."""
    operator = bech32ify(config.bech32_prefix_val, consensus_address_bytes(validator))
    return MsgCreateValidator(
        description=Description(moniker=config.gentx_moniker),
        commission=CommissionRates(
            rate=config.commission_rate,
            max_rate=config.commission_max_rate,
            max_change_rate=config.commission_max_change_rate,
        ),
        min_self_delegation=config.gentx_min_self_delegation,
        validator_address=operator,
        pubkey=AnyPubKey.ed25519(validator.pub_key.raw()),
        value=bond_amount,
    )


def sign_genesis_tx(
    account_key: bytes,
    validator: GenesisValidator,
    bond_amount: Coin,
    chain_id: str,
    config: NetworkConfig = CURRENT_NETWORK,
) -> Tx:
    """
    Signs one gentx. Any failure here is fatal to the genesis build.

    Args:
        account_key: secp256k1 private key of the delegator
        validator: Consensus validator being created
        bond_amount: Self-delegated stake
        chain_id: Chain the signature is bound to

    Returns:
        Tx with exactly one create-validator message and one signature
    """
    if not chain_id:
        raise PreconditionError("gentx signing requires a chain id")

    msg = new_msg_create_validator(validator, bond_amount, config)

    # Self-delegation: the signer is the delegator
    pub_key = secp256k1.public_key_from_private(account_key)
    delegator = address_from_pubkey(pub_key, prefix=config.bech32_prefix_acc)
    msg = msg.model_copy(update={"delegator_address": delegator})

    msg.validate_basic(config.bech32_prefix_acc, config.bech32_prefix_val)

    builder = TxBuilder()
    builder.set_msgs(msg)

    sign_bytes = get_sign_bytes(
        SIGN_MODE,
        SignerData(chain_id=chain_id, pub_key=pub_key, address=delegator),
        builder.get_tx(),
        allow_missing_account=True,
    )
    signature = secp256k1.sign(sign_bytes, account_key)

    builder.set_signatures(SignatureV2(pub_key=pub_key, signature=signature, sign_mode=SIGN_MODE))

    logger.debug(f"Signed gentx for {validator.name or validator.address} by {delegator}")
    return builder.get_tx()


def verify_genesis_tx(tx: Tx, chain_id: str) -> bool:
    """Checks the single signature of a gentx against its signer info."""
    if len(tx.body.messages) != 1 or len(tx.signatures) != 1 or len(tx.auth_info.signer_infos) != 1:
        return False

    pub_key = tx.auth_info.signer_infos[0].public_key.raw()
    unsigned = Tx(body=tx.body)
    sign_bytes = get_sign_bytes(
        tx.auth_info.signer_infos[0].mode_info.single.mode,
        SignerData(chain_id=chain_id, pub_key=pub_key, address=tx.body.messages[0].delegator_address),
        unsigned,
        allow_missing_account=True,
    )
    try:
        signature = base64.b64decode(tx.signatures[0], validate=True)
    except binascii.Error:
        return False
    return secp256k1.verify(sign_bytes, signature, pub_key)
