import pytest

from keymesh_proxy.core.config import Settings, settings
from keymesh_proxy.core.network import is_private_network


@pytest.mark.parametrize("network_id", [0, 1, 2, 3, 4, 8, 42, 77, 99, 7762959])
def test_known_networks_are_public(network_id):
    assert not is_private_network(network_id)


@pytest.mark.parametrize("network_id", [5, 1017, 1337, 31337])
def test_other_networks_are_private(network_id):
    assert is_private_network(network_id)


def test_public_networks_configurable(monkeypatch):
    monkeypatch.setattr(settings, "PUBLIC_NETWORK_IDS", [3])

    assert is_private_network(1)
    assert not is_private_network(3)


def test_public_networks_from_comma_separated_value():
    configured = Settings(PUBLIC_NETWORK_IDS="1, 3,42")

    assert configured.PUBLIC_NETWORK_IDS == [1, 3, 42]
