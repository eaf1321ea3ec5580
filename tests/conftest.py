from types import SimpleNamespace

import pytest

import deployment.networks
import deployment.params
import deployment.utils
from deployment.constants import RANDOM_WINNER_GAME

CHAIN_ID = 80001
CONTRACT_ADDRESS = "0x" + "12" * 20
DEPLOYER_ADDRESS = "0x" + "34" * 20

# constructor arguments, in constructor order
VRF_COORDINATOR = "0x" + "1" * 40
LINK_TOKEN = "0x" + "2" * 40
KEY_HASH = b"\x01" * 32
FEE = 100_000_000_000_000
CONSTRUCTOR_ARGS = [VRF_COORDINATOR, LINK_TOKEN, KEY_HASH, FEE]

CONSTRUCTOR_ABI = [
    ("vrfCoordinator", "address"),
    ("linkToken", "address"),
    ("vrfKeyHash", "bytes32"),
    ("vrfFee", "uint256"),
]


class Clock:
    """Simulated clock; sleeping advances it instead of blocking."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class AbiEntry:
    def __init__(self, **fields):
        self.fields = fields

    def model_dump(self, **kwargs):
        return dict(self.fields)


class FakeContainer:
    def __init__(self, name=RANDOM_WINNER_GAME, abi_inputs=CONSTRUCTOR_ABI):
        inputs = [SimpleNamespace(name=n, type=t) for n, t in abi_inputs]
        self.contract_type = SimpleNamespace(name=name, abi=[])
        self.constructor = SimpleNamespace(
            abi=SimpleNamespace(inputs=inputs), encode_input=self._encode_input
        )
        self.encoded = []

    def _encode_input(self, *args):
        self.encoded.append(list(args))
        return b"\x00" * 32 * len(args)


class FakeInstance:
    def __init__(self, name=RANDOM_WINNER_GAME, address=CONTRACT_ADDRESS):
        self.address = address
        self.contract_type = SimpleNamespace(
            name=name,
            abi=[
                AbiEntry(type="function", name="startGame", inputs=[], outputs=[]),
                AbiEntry(type="constructor", inputs=[]),
            ],
        )
        self.receipt = SimpleNamespace(
            chain_id=CHAIN_ID,
            txn_hash="0x" + "ab" * 32,
            block_number=42,
            transaction=SimpleNamespace(sender=DEPLOYER_ADDRESS),
        )


class FakeAccount:
    def __init__(self, clock, events, error=None):
        self.address = DEPLOYER_ADDRESS
        self.autosign = None
        self.deployments = []
        self._clock = clock
        self._events = events
        self._error = error

    def set_autosign(self, enabled):
        self.autosign = enabled

    def deploy(self, container, *args, **kwargs):
        self.deployments.append((container, list(args), kwargs))
        if self._error:
            raise self._error
        self._events.append(("deployed", self._clock.now))
        return FakeInstance(name=container.contract_type.name)


class FakeExplorer:
    def __init__(self, clock, events, error=None):
        self.published = []
        self._clock = clock
        self._events = events
        self._error = error

    def publish_contract(self, address):
        self.published.append(address)
        self._events.append(("verify", self._clock.now))
        if self._error:
            raise self._error


@pytest.fixture
def clock(monkeypatch):
    _clock = Clock()
    monkeypatch.setattr(deployment.utils.time, "sleep", _clock.sleep)
    return _clock


@pytest.fixture
def events():
    return []


@pytest.fixture
def explorer(clock, events):
    return FakeExplorer(clock, events)


@pytest.fixture
def network(explorer):
    return SimpleNamespace(
        name="local",
        chain_id=CHAIN_ID,
        ecosystem=SimpleNamespace(name="polygon"),
        explorer=explorer,
    )


@pytest.fixture
def fake_networks(monkeypatch, network):
    _networks = SimpleNamespace(provider=SimpleNamespace(network=network, gas_price=30))
    for module in (deployment.networks, deployment.utils, deployment.params):
        monkeypatch.setattr(module, "networks", _networks)
    return _networks


@pytest.fixture
def container():
    return FakeContainer()


@pytest.fixture
def fake_project(monkeypatch, container):
    _project = SimpleNamespace(dependencies={}, **{RANDOM_WINNER_GAME: container})
    monkeypatch.setattr(deployment.utils, "project", _project)
    return _project


@pytest.fixture
def account(clock, events):
    return FakeAccount(clock, events)


@pytest.fixture
def config(tmp_path):
    return {
        "deployment": {"contract": RANDOM_WINNER_GAME, "chain_id": CHAIN_ID},
        "registry": str(tmp_path / "artifacts" / "random-winner-game.json"),
        "constants": {
            "VRF_COORDINATOR": VRF_COORDINATOR,
            "LINK_TOKEN": LINK_TOKEN,
            "KEY_HASH": KEY_HASH,
            "FEE": FEE,
        },
        "constructor": {
            "vrfCoordinator": "$VRF_COORDINATOR",
            "linkToken": "$LINK_TOKEN",
            "vrfKeyHash": "$KEY_HASH",
            "vrfFee": "$FEE",
        },
    }


@pytest.fixture
def chain(fake_networks, fake_project):
    """Connected local network with the game contract compiled."""
    return fake_networks
