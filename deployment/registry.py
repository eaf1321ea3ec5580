import json
from pathlib import Path
from typing import Dict

from ape.contracts import ContractInstance
from eth_typing import ABI
from eth_utils import to_checksum_address

from deployment.utils import load_json

REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


def _sorted_abi(instance: ContractInstance) -> ABI:
    abi = [entry.model_dump(mode="json", by_alias=True) for entry in instance.contract_type.abi]
    return sorted(abi, key=lambda item: (item["type"], item.get("name", "")))


def registry_entry(instance: ContractInstance) -> Dict:
    """The registry record of a freshly deployed contract."""
    receipt = instance.receipt
    return {
        "address": to_checksum_address(instance.address),
        "abi": _sorted_abi(instance),
        "tx_hash": receipt.txn_hash,
        "block_number": int(receipt.block_number),
        "deployer": receipt.transaction.sender,
    }


def record_deployment(instance: ContractInstance, filepath: Path) -> Path:
    """
    Adds a deployment to a JSON registry keyed by chain id, then contract name.

    A contract already registered for the same chain is never overwritten;
    the new record goes to a sibling ``.unmerged.json`` file instead.
    """
    chain_id = str(instance.receipt.chain_id)
    contract_name = instance.contract_type.name

    registry = load_json(filepath) if filepath.exists() else {}
    if contract_name in registry.get(chain_id, {}):
        filepath = filepath.with_suffix(".unmerged.json")
        print(f"{contract_name} is already registered for chain {chain_id}.")
        registry = {}

    registry.setdefault(chain_id, {})[contract_name] = registry_entry(instance)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(registry, file, **REGISTRY_JSON_FORMAT)

    print(f"(i) Registry written to {filepath}!")
    return filepath
