import sys
from collections import OrderedDict

from ape.utils import ZERO_ADDRESS


def _ask(question: str) -> None:
    """Exits the process when the answer is 'n'."""
    answer = input(f"{question} Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        sys.exit(-1)


def confirm_start() -> None:
    _ask("Continue")


def confirm_deployment(contract_name: str, arguments: OrderedDict) -> None:
    """Shows the constructor arguments and asks before deploying."""
    print(f"\nConstructor arguments for {contract_name}")
    for name, value in arguments.items():
        print(f"\t{name}={value}")
    _ask(f"Deploy {contract_name}")
    if ZERO_ADDRESS in arguments.values():
        _ask("Zero address passed as a constructor argument; continue?")
