#!/usr/bin/python3
import os
import sys
import traceback

import click
from ape import accounts
from dotenv import load_dotenv

from deployment.constants import (
    CONSTRUCTOR_PARAMS_DIR,
    DEPLOYER_ACCOUNT_ENVVAR,
    DEPLOYER_AUTOSIGN_ENVVAR,
    ENV_FILE,
)
from deployment.params import Deployer, DeploymentResult

VERIFY = True
CONSTRUCTOR_PARAMS_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "random_winner_game.yml"


def _get_account():
    alias = os.environ.get(DEPLOYER_ACCOUNT_ENVVAR)
    if not alias:
        return None  # prompt for one
    return accounts.load(alias)


def _autosign() -> bool:
    return os.environ.get(DEPLOYER_AUTOSIGN_ENVVAR, "").lower().strip() in ("1", "true", "yes")


def run() -> DeploymentResult:
    load_dotenv(ENV_FILE)
    deployer = Deployer.from_yaml(
        filepath=CONSTRUCTOR_PARAMS_FILEPATH,
        verify=VERIFY,
        account=_get_account(),
        autosign=_autosign(),
    )
    random_winner_game = deployer.deploy()
    return deployer.finalize(random_winner_game)


def main():
    try:
        run()
    except Exception:
        click.secho(traceback.format_exc(), fg="red", err=True)
        sys.exit(1)
