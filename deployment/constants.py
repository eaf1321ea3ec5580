from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
ENV_FILE = PROJECT_ROOT / ".env"

#
# Networks
#

LOCAL_NETWORKS = ["local"]

#
# Environment
#

DEPLOYER_ACCOUNT_ENVVAR = "DEPLOYER_ACCOUNT"
DEPLOYER_AUTOSIGN_ENVVAR = "DEPLOYER_AUTOSIGN"

#
# Contracts
#

RANDOM_WINNER_GAME = "RandomWinnerGame"

#
# Verification
#

# seconds to wait for the block explorer to index a fresh deployment
VERIFICATION_DELAY = 30
