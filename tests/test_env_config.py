import pytest

from env_config import Env, EnvError, load_env


def test_load_env_defaults(full_env):
    env = load_env(full_env)

    assert isinstance(env, Env)
    assert env.MNEMONIC == full_env["MNEMONIC"]
    assert env.HARDHAT_NETWORK == "hardhat"
    assert env.PRIVATE_KEY is None


def test_load_env_optional_values(full_env):
    env = load_env({**full_env, "HARDHAT_NETWORK": "polygon_mumbai", "PRIVATE_KEY": "0xabc"})

    assert env.HARDHAT_NETWORK == "polygon_mumbai"
    assert env.PRIVATE_KEY == "0xabc"


def test_load_env_ignores_unknown_variables(full_env):
    env = load_env({**full_env, "PATH": "/usr/bin", "CONTRACT_ADDRESS": "0x0"})
    assert not hasattr(env, "PATH")


def test_load_env_missing_required(full_env):
    environ = dict(full_env)
    del environ["ALCHEMY_KEY"]
    del environ["POLYGONSCAN_API_KEY"]

    with pytest.raises(EnvError) as info:
        load_env(environ)

    assert "ALCHEMY_KEY" in str(info.value)
    assert "POLYGONSCAN_API_KEY" in str(info.value)
    assert len(info.value.errors) == 2


def test_load_env_reads_process_environment(monkeypatch, full_env):
    for key, value in full_env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("HARDHAT_NETWORK", "localhost")

    assert load_env().HARDHAT_NETWORK == "localhost"
