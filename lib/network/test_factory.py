"""
Unit tests for NetworkFactory and the mapper channel
"""

import base64

import pytest

from lib.network import (
    CustomHost,
    DefaultNetwork,
    NetworkAPI,
    NetworkFactory,
    NetworkFactoryConfig,
    NetworkMock,
    NetworkMockData,
    decodeMapper,
    encodeMapper,
)

HOST = CustomHost(host="api.example.com", path="/v1")
ENV_ENTRIES = [NetworkMockData(api="/v1/users", filename="users_env", root="fixtures")]
CALLER_ENTRIES = [NetworkMockData(api="/v1/users", filename="users_caller")]


def test_mapper_encode_decode():
    """Test mapper channel value decodes back to the same entries, dood!"""
    encoded = encodeMapper(ENV_ENTRIES)

    assert decodeMapper(encoded) == ENV_ENTRIES


def test_decode_mapper_accepts_plain_json_array():
    """Test mapper built by external tooling without optional fields"""
    encoded = base64.b64encode(b'[{"api":"/status","filename":"status"}]').decode()

    assert decodeMapper(encoded) == [NetworkMockData(api="/status", filename="status")]


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "not base64 at all!",
        base64.b64encode(b"not json").decode(),
        base64.b64encode(b'{"api":"/x","filename":"x"}').decode(),
        base64.b64encode(b'[{"api":"/x"}]').decode(),
    ],
)
def test_decode_mapper_failures_are_absent(value):
    """Test undecodable mapper is treated as missing, dood!"""
    assert decodeMapper(value) is None


def test_live_client_without_mocks():
    """Test DefaultNetwork when nothing requests mocking"""
    network = NetworkFactory.make(host=HOST, config=NetworkFactoryConfig())

    assert isinstance(network, DefaultNetwork)
    assert network.customHost == HOST


def test_environment_mapper_with_mock_argument():
    """Test mock argument plus decodable mapper builds mock from environment, dood!"""
    config = NetworkFactoryConfig(
        arguments=("app", "mock"),
        environment={"mapper": encodeMapper(ENV_ENTRIES)},
        debug=True,
    )

    network = NetworkFactory.make(host=HOST, mapper=CALLER_ENTRIES, config=config)

    assert isinstance(network, NetworkMock)
    assert list(network.mapper) == ENV_ENTRIES


def test_environment_mapper_ignored_without_mock_argument():
    """Test mapper variable alone does not enable mocking"""
    config = NetworkFactoryConfig(arguments=("app",), environment={"mapper": encodeMapper(ENV_ENTRIES)}, debug=True)

    assert isinstance(NetworkFactory.make(host=HOST, config=config), DefaultNetwork)


def test_caller_mapper_used_when_environment_undecodable():
    """Test fall through to caller entries on bad mapper, dood!"""
    config = NetworkFactoryConfig(arguments=("app", "mock"), environment={"mapper": "%%%"}, debug=True)

    network = NetworkFactory.make(host=HOST, mapper=CALLER_ENTRIES, config=config)

    assert isinstance(network, NetworkMock)
    assert list(network.mapper) == CALLER_ENTRIES


def test_caller_mapper_without_mock_argument():
    """Test explicit entries select mock client"""
    network = NetworkFactory.make(host=HOST, mapper=CALLER_ENTRIES, config=NetworkFactoryConfig(debug=True))

    assert isinstance(network, NetworkMock)


def test_mock_argument_without_anything_falls_to_live():
    """Test mock argument with no mapper anywhere gives live client, dood!"""
    config = NetworkFactoryConfig(arguments=("app", "mock"), environment={}, debug=True)

    assert isinstance(NetworkFactory.make(host=HOST, config=config), DefaultNetwork)


def test_release_config_always_live():
    """Test non-debug config never builds mocks"""
    config = NetworkFactoryConfig(
        arguments=("app", "mock"),
        environment={"mapper": encodeMapper(ENV_ENTRIES)},
        debug=False,
    )

    network = NetworkFactory.make(host=HOST, mapper=CALLER_ENTRIES, config=config)

    assert isinstance(network, DefaultNetwork)


def test_mock_receives_environment_overrides():
    """Test environment is passed to mock client as path overrides, dood!"""
    config = NetworkFactoryConfig(environment={"/v1/status": "status"}, debug=True)

    network = NetworkFactory.make(host=HOST, mapper=[], config=config, fixtureRoot="fixtures")

    assert isinstance(network, NetworkMock)
    assert network.overrides == {"/v1/status": "status"}
    assert network.fixtureRoot == "fixtures"


def test_live_client_options_passed_through():
    """Test executor options reach DefaultNetwork"""
    network = NetworkFactory.make(timeout=3.5, trustAllCertificates=True, config=NetworkFactoryConfig(debug=True))

    assert isinstance(network, DefaultNetwork)
    assert network.timeout == 3.5
    assert network.trustAllCertificates is True


def test_config_from_process_captures_state(monkeypatch):
    """Test process state is captured once and not affected later, dood!"""
    monkeypatch.setenv("mapper", "abc")
    config = NetworkFactoryConfig.fromProcess(arguments=["app", "mock"])
    monkeypatch.setenv("mapper", "changed")

    assert config.isMockRequested
    assert config.environment["mapper"] == "abc"
    assert config.debug is __debug__

    with pytest.raises(TypeError):
        config.environment["mapper"] = "x"  # type: ignore[index]


def test_fallback_to_live_builds_mock_first_client():
    """Test fallback option gives NetworkAPI with mock entries and live options, dood!"""
    config = NetworkFactoryConfig(environment={"/v1/status": "status"}, debug=True)

    network = NetworkFactory.make(host=HOST, mapper=CALLER_ENTRIES, config=config, timeout=7, fallbackToLive=True)

    assert isinstance(network, NetworkAPI)
    assert list(network.mock.mapper) == CALLER_ENTRIES
    assert network.mock.overrides == {"/v1/status": "status"}
    assert network.live.timeout == 7


def test_fallback_to_live_ignored_without_mocks():
    """Test fallback option alone still gives live client"""
    network = NetworkFactory.make(host=HOST, config=NetworkFactoryConfig(debug=True), fallbackToLive=True)

    assert isinstance(network, DefaultNetwork)
