# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import json
import logging
import os
import sys

from ..genesis.keys import ValidatorPrivKeys
from ..genesis.modules.genutil import GenutilGenesisState
from ..genesis.pipeline import default_genesis_only_validators
from ..genesis.signer import verify_genesis_tx
from ..protocol.config.params import CURRENT_NETWORK, GENUTIL_MODULE, NETWORKS
from ..protocol.crypto.addresses import address_from_pubkey
from ..protocol.types.coins import new_coin
from ..protocol.types.common import ProtocolError

logger = logging.getLogger(__name__)


def write_key_files(keys: ValidatorPrivKeys, keys_dir: str, config) -> list:
    """One JSON key file per validator, readable by the owner only."""
    os.makedirs(keys_dir, exist_ok=True)
    paths = []
    for i, pk in enumerate(keys):
        path = os.path.join(keys_dir, f"validator_{i}.json")
        with open(path, "w") as f:
            json.dump({
                "name": f"val-{i}",
                "consensus_priv_key": pk.val.hex(),
                "delegator_priv_key": pk.delegator.hex(),
                "delegator_address": address_from_pubkey(pk.del_pub_key, prefix=config.bech32_prefix_acc),
            }, f, indent=2)
        os.chmod(path, 0o600)  # Restrict permissions
        paths.append(path)
    return paths


def cmd_generate(args):
    config = NETWORKS[args.network] if args.network else CURRENT_NETWORK
    chain_id = args.chain_id or config.chain_id

    keys = ValidatorPrivKeys.generate(args.validators)
    cmt_vals = keys.comet_genesis_validators(config)
    staking_vals, supply = cmt_vals.staking_validators(config)

    amount = new_coin(config.bond_denom, config.power_reduction)
    genesis = default_genesis_only_validators(chain_id, staking_vals, amount, config).run()

    key_paths = write_key_files(keys, args.keys_dir, config)
    genesis.write(args.genesis_output)

    print(f"--- Genesis Summary ---")
    print(f"Chain ID:   {chain_id}")
    print(f"Validators: {len(staking_vals)}")
    print(f"Supply:     {', '.join(str(c) for c in supply)}")
    print(f"Hash:       {genesis.hash()}")
    print(f"\nFiles created:")
    print(f"  {args.genesis_output}")
    for path in key_paths:
        print(f"  {path}")


def cmd_verify(args):
    with open(args.genesis) as f:
        doc = json.load(f)

    chain_id = doc.get("chain_id", "")
    genutil = GenutilGenesisState.model_validate(doc.get("app_state", {}).get(GENUTIL_MODULE, {}))
    if not genutil.gen_txs:
        logger.error(f"{args.genesis}: no gentxs found")
        sys.exit(1)

    bad = [i for i, tx in enumerate(genutil.gen_txs) if not verify_genesis_tx(tx, chain_id)]
    if bad:
        logger.error(f"{args.genesis}: invalid gentx signatures at {bad}")
        sys.exit(1)
    print(f"{len(genutil.gen_txs)} gentxs verified for {chain_id}")


def main(argv=None):
    parser = argparse.ArgumentParser(prog="genesiskit", description="Genesis builder for local validator networks")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Sub-commands")

    p_gen = subparsers.add_parser("generate", help="Generate validator keys and a signed genesis file")
    p_gen.add_argument("--validators", "-n", type=int, default=4, help="Number of validators (default: 4)")
    p_gen.add_argument("--chain-id", help="Chain ID (default: the network's chain id)")
    p_gen.add_argument("--network", choices=sorted(NETWORKS), help="Network parameters to use")
    p_gen.add_argument("--genesis-output", "-o", default="./data/genesis.json", help="Genesis file output path")
    p_gen.add_argument("--keys-dir", "-k", default="./data/keys", help="Output directory for validator keys")

    p_verify = subparsers.add_parser("verify", help="Check the gentx signatures of a genesis file")
    p_verify.add_argument("genesis", help="Path to genesis.json")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    if args.command == "generate":
        if args.validators < 1:
            parser.error("Number of validators must be at least 1")
        handler = cmd_generate
    elif args.command == "verify":
        handler = cmd_verify
    else:
        parser.print_help()
        return

    try:
        handler(args)
    except ProtocolError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
