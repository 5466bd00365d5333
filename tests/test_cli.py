# MIT License
# Copyright (c) 2025 Hashborn

import json
import os

import pytest

from genesiskit.cli.main import main
from genesiskit.genesis.modules.genutil import GenutilGenesisState
from genesiskit.genesis.signer import verify_genesis_tx


def test_generate(tmp_path, capsys):
    genesis_path = tmp_path / "out" / "genesis.json"
    keys_dir = tmp_path / "keys"

    main([
        "generate", "--validators", "2", "--chain-id", "cli-chain",
        "--genesis-output", str(genesis_path), "--keys-dir", str(keys_dir),
    ])

    doc = json.loads(genesis_path.read_text())
    assert doc["chain_id"] == "cli-chain"
    assert len(doc["consensus"]["validators"]) == 2

    genutil = GenutilGenesisState.model_validate(doc["app_state"]["genutil"])
    assert len(genutil.gen_txs) == 2
    assert all(verify_genesis_tx(tx, "cli-chain") for tx in genutil.gen_txs)

    key_files = sorted(os.listdir(keys_dir))
    assert key_files == ["validator_0.json", "validator_1.json"]
    assert oct(os.stat(keys_dir / key_files[0]).st_mode & 0o777) == "0o600"

    out = capsys.readouterr().out
    assert "Validators: 2" in out


def test_verify(tmp_path, capsys):
    genesis_path = tmp_path / "genesis.json"
    main(["generate", "-n", "1", "-o", str(genesis_path), "-k", str(tmp_path / "keys")])
    capsys.readouterr()

    main(["verify", str(genesis_path)])
    assert "1 gentxs verified" in capsys.readouterr().out


def test_verify_rejects_wrong_chain(tmp_path):
    genesis_path = tmp_path / "genesis.json"
    main(["generate", "-n", "1", "--chain-id", "real-chain", "-o", str(genesis_path), "-k", str(tmp_path / "keys")])

    doc = json.loads(genesis_path.read_text())
    doc["chain_id"] = "forged-chain"
    genesis_path.write_text(json.dumps(doc))

    with pytest.raises(SystemExit) as exc_info:
        main(["verify", str(genesis_path)])
    assert exc_info.value.code == 1


def test_generate_rejects_zero_validators(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main(["generate", "-n", "0", "-o", str(tmp_path / "g.json"), "-k", str(tmp_path / "keys")])
    assert exc_info.value.code == 2


def test_verify_rejects_gentx_without_messages(tmp_path):
    genesis_path = tmp_path / "genesis.json"
    main(["generate", "-n", "1", "-o", str(genesis_path), "-k", str(tmp_path / "keys")])

    doc = json.loads(genesis_path.read_text())
    doc["app_state"]["genutil"]["gen_txs"][0]["body"]["messages"] = []
    genesis_path.write_text(json.dumps(doc))

    with pytest.raises(SystemExit) as exc_info:
        main(["verify", str(genesis_path)])
    assert exc_info.value.code == 1
