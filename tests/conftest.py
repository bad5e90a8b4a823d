import pytest
from httpx import ASGITransport

import app.constants as constants
import app.main
import utils.web3
from app.config import Settings
from tests.utils.common_classes import (
    TEST_DEPOSIT,
    TEST_NONCE,
    TEST_ON_CHAIN_HASH,
    TEST_PRIVATE_KEY,
    FakeBundler,
    FakeContract,
)
from utils.signer import Signer


@pytest.fixture(scope="function")
def settings() -> Settings:
    return Settings(
        _env_file=None,
        private_key=TEST_PRIVATE_KEY,
        bundler_url="http://bundler.test/rpc",
        sepolia_rpc_url="http://node.test",
        hash_oracle="local",
    )


@pytest.fixture(scope="function")
def signer() -> Signer:
    return Signer(TEST_PRIVATE_KEY)


@pytest.fixture(scope="function")
def fake_bundler() -> FakeBundler:
    return FakeBundler()


@pytest.fixture(scope="function")
def transport(fake_bundler) -> ASGITransport:
    return ASGITransport(app=fake_bundler.app)


@pytest.fixture(scope="function")
def entry_point() -> FakeContract:
    return FakeContract(
        constants.ENTRY_POINT_ADDRESS,
        getNonce=lambda sender, key: TEST_NONCE,
        balanceOf=lambda address: TEST_DEPOSIT,
        getUserOpHash=lambda user_op: TEST_ON_CHAIN_HASH,
    )


@pytest.fixture(scope="function")
def user_op(settings):
    call_data = utils.web3.encode_execute_call_data(
        settings.destination, settings.call_value, settings.call_func
    )
    return app.main.build_user_op(settings, TEST_NONCE, call_data)
