import json
import os
import time
from pathlib import Path
from typing import Any, List

import yaml
from ape import networks, project
from ape.contracts import ContractContainer

from deployment.networks import is_local_network


def load_yaml(filepath: Path) -> dict:
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def load_json(filepath: Path) -> dict:
    with open(filepath, "r") as file:
        return json.load(file)


def check_explorer_api_key() -> None:
    """Live networks need an API key for the ecosystem's block explorer."""
    if is_local_network():
        return
    try:
        from ape_etherscan.utils import API_KEY_ENV_KEY_MAP
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to verify contracts.")
    ecosystem = networks.provider.network.ecosystem.name
    envvar = API_KEY_ENV_KEY_MAP.get(ecosystem, "ETHERSCAN_API_KEY")
    if not os.environ.get(envvar):
        raise ValueError(f"{envvar} is not set.")


def check_plugins() -> None:
    print("Checking plugins...")
    check_explorer_api_key()


def get_contract_container(contract_name: str) -> ContractContainer:
    """Looks a contract type up in the project, then in its dependencies."""
    if hasattr(project, contract_name):
        return getattr(project, contract_name)

    for dependency_name, versions in project.dependencies.items():
        if len(versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract_name}")
        (dependency,) = versions.values()
        if hasattr(dependency, contract_name):
            return getattr(dependency, contract_name)

    raise ValueError(f"No contract found with name '{contract_name}'.")


def wait_for_explorer(delay: int) -> None:
    """Blocks for a fixed number of seconds so the explorer can index new contracts."""
    print("Sleeping.....")
    time.sleep(delay)


def verify_contract(
    container: ContractContainer, address: str, constructor_args: List[Any]
) -> None:
    """Submits the source of a deployed contract to the network's block explorer."""
    explorer = networks.provider.network.explorer
    if explorer is None:
        raise ValueError(f"No explorer configured for network '{networks.provider.network.name}'.")

    encoded_args = container.constructor.encode_input(*constructor_args)
    print(f"(i) Verifying {container.contract_type.name} at {address}...")
    print(f"\tEncoded constructor arguments: {encoded_args.hex()}")
    explorer.publish_contract(address)
