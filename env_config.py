"""
Environment validation for the Veridca harness.

Reads the process environment (after load_dotenv) and checks the variables
the deploy/verify tooling depends on.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError


class EnvError(RuntimeError):
    """Raised when required environment variables are missing or malformed"""

    def __init__(self, errors):
        self.errors = errors
        fields = ", ".join(".".join(str(p) for p in e["loc"]) for e in errors)
        super().__init__(f"Invalid environment: {fields}")


class Env(BaseModel):
    model_config = ConfigDict(extra="ignore")

    MNEMONIC: str
    HARDHAT_NETWORK: str = "hardhat"
    ALCHEMY_KEY: str
    ETHERSCAN_API_KEY: str
    POLYGONSCAN_API_KEY: str
    PRIVATE_KEY: Optional[str] = None


def load_env(environ: Optional[Mapping[str, str]] = None) -> Env:
    source = os.environ if environ is None else environ
    try:
        return Env.model_validate(dict(source))
    except ValidationError as e:
        raise EnvError(e.errors()) from e
