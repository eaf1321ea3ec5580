import typing
from collections import OrderedDict
from pathlib import Path
from typing import Any, List, NamedTuple, Optional

from ape import networks
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance
from eth_typing import ChecksumAddress
from web3.auto import w3

from deployment.confirm import confirm_deployment, confirm_start
from deployment.constants import ARTIFACTS_DIR, VERIFICATION_DELAY
from deployment.networks import is_local_network
from deployment.registry import record_deployment
from deployment.utils import (
    check_plugins,
    get_contract_container,
    load_yaml,
    verify_contract,
    wait_for_explorer,
)

CONSTANT_PREFIX = "$"


class DeploymentConfig(NamedTuple):
    """
    Parameters file of a single contract deployment:

        deployment: {contract: <name>, chain_id: <id>}
        registry: <filename, relative to deployment/artifacts>
        constants: {NAME: value, ...}
        constructor: {argument: value or $NAME, ...}   # in ABI order
    """

    contract_name: str
    chain_id: int
    registry_filepath: Path
    constants: typing.Dict[str, Any]
    constructor: "OrderedDict[str, Any]"

    @classmethod
    def from_dict(cls, data: typing.Dict) -> "DeploymentConfig":
        deployment = data.get("deployment") or {}
        if not deployment.get("contract"):
            raise ValueError("deployment.contract is not set in params file.")
        if not deployment.get("chain_id"):
            raise ValueError("deployment.chain_id is not set in params file.")
        if not data.get("registry"):
            raise ValueError("registry is not set in params file.")

        return cls(
            contract_name=deployment["contract"],
            chain_id=int(deployment["chain_id"]),
            registry_filepath=ARTIFACTS_DIR / data["registry"],
            constants=data.get("constants") or {},
            constructor=OrderedDict(data.get("constructor") or {}),
        )

    @classmethod
    def from_yaml(cls, filepath: Path) -> "DeploymentConfig":
        print(f"Loading parameters from {filepath}...")
        return cls.from_dict(load_yaml(filepath))

    def check_chain(self) -> None:
        chain_id = networks.provider.network.chain_id
        if self.chain_id != chain_id and not is_local_network():
            raise ValueError(
                f"Params file targets chain {self.chain_id} "
                f"but the connected network is chain {chain_id}."
            )


def _resolve(value: Any, constants: typing.Dict[str, Any]) -> Any:
    if not (isinstance(value, str) and value.startswith(CONSTANT_PREFIX)):
        return value
    name = value[len(CONSTANT_PREFIX) :]
    try:
        return constants[name]
    except KeyError:
        raise ValueError(f"Constant '{name}' not found in params file.")


class ConstructorArguments:
    """Resolved constructor arguments of a contract, checked against its ABI."""

    class Invalid(Exception):
        """Raised when the arguments do not fit the constructor"""

    def __init__(self, container: ContractContainer, values: OrderedDict):
        self.contract_name = container.contract_type.name
        self.values = values
        self._check(container.constructor.abi.inputs)

    @classmethod
    def from_config(
        cls, config: DeploymentConfig, container: ContractContainer
    ) -> "ConstructorArguments":
        values = OrderedDict(
            (name, _resolve(value, config.constants)) for name, value in config.constructor.items()
        )
        return cls(container, values)

    def _check(self, abi_inputs: List[Any]) -> None:
        expected = [abi_input.name for abi_input in abi_inputs]
        if list(self.values) != expected:
            raise self.Invalid(
                f"{self.contract_name} constructor takes ({', '.join(expected)}); "
                f"params file gives ({', '.join(self.values)})."
            )
        for abi_input, value in zip(abi_inputs, self.values.values()):
            if not w3.is_encodable(abi_input.type, value):
                raise self.Invalid(
                    f"{self.contract_name} constructor argument '{abi_input.name}' "
                    f"is not a valid {abi_input.type}: {value!r}"
                )

    def as_list(self) -> List[Any]:
        return list(self.values.values())


class DeploymentResult(NamedTuple):
    name: str
    address: ChecksumAddress
    constructor_args: List[Any]
    registry_filepath: Path
    verified: bool


class Deployer:
    """Deploys one contract from a params file, records it and verifies it."""

    class VerificationFailed(Exception):
        """Raised when the block explorer rejects a verification request"""

    def __init__(
        self,
        config: DeploymentConfig,
        verify: bool,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
        verification_delay: int = VERIFICATION_DELAY,
    ):
        # validation first, so nothing is asked of the user for a broken config
        check_plugins()
        config.check_chain()
        self.config = config
        self.container = get_contract_container(config.contract_name)
        self.constructor_args = ConstructorArguments.from_config(config, self.container)

        self.account = account if account is not None else select_account()
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self.account.set_autosign(autosign)
        self.autosign = autosign
        self.verify = verify
        self.verification_delay = verification_delay

        self._print_deployment_info()
        if not autosign:
            confirm_start()

    @classmethod
    def from_yaml(cls, filepath: Path, **kwargs) -> "Deployer":
        return cls(DeploymentConfig.from_yaml(filepath), **kwargs)

    def deploy(self) -> ContractInstance:
        """Deploys the contract and blocks until the chain has confirmed it."""
        contract_name = self.config.contract_name
        if not self.autosign:
            confirm_deployment(contract_name, self.constructor_args.values)

        # published to the explorer separately, once it has indexed the contract
        instance = self.account.deploy(
            self.container, *self.constructor_args.as_list(), publish=False
        )
        print(f"{contract_name} Contract Address: {instance.address}")
        return instance

    def finalize(self, instance: ContractInstance) -> DeploymentResult:
        """Records the deployment, then waits for the explorer and verifies it."""
        registry_filepath = record_deployment(instance, self.config.registry_filepath)
        constructor_args = self.constructor_args.as_list()
        if self.verify:
            wait_for_explorer(self.verification_delay)
            try:
                verify_contract(self.container, instance.address, constructor_args)
            except Exception as e:
                raise self.VerificationFailed(
                    f"{self.config.contract_name} is deployed at {instance.address} "
                    f"but could not be verified: {e}"
                ) from e

        return DeploymentResult(
            name=self.config.contract_name,
            address=instance.address,
            constructor_args=constructor_args,
            registry_filepath=registry_filepath,
            verified=self.verify,
        )

    def _print_deployment_info(self):
        network = networks.provider.network
        print(
            f"Account: {self.account.address}",
            f"Contract: {self.config.contract_name}",
            f"Registry: {self.config.registry_filepath}",
            f"Verify: {self.verify} (after {self.verification_delay}s)",
            f"Network: {network.ecosystem.name}:{network.name} (chain {network.chain_id})",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
