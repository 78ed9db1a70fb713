import pytest

from cubenet.addressing import (
    NodeConfig,
    RoutingError,
    node_config,
    resolve_data_link_addr,
    resolve_network_addr,
)

NODE_NAMES = ["cube0", "cube1", "cube2", "rover_trx"]


@pytest.mark.parametrize(
    "network_addr, data_link_addr",
    [
        (0x3A, 0x3A3A3A3A),
        (0x3B, 0x3B3B3B3B),
        (0x3C, 0x3C3C3C3C),
        (0x3F, 0x3F3F3F3F),
    ],
)
def test_resolve_known_addresses(network_addr, data_link_addr):
    assert resolve_data_link_addr(network_addr) == data_link_addr


def test_resolve_unknown_address_passes_through():
    assert resolve_data_link_addr(0x10) == 0x10


def test_resolve_network_addr_is_the_port():
    for port in (0x3A, 0x3B, 0x3C, 0x3F):
        assert resolve_network_addr(port) == port


@pytest.mark.parametrize(
    "name, final, hop",
    [
        ("cube0", 0x3A, 0x3A),
        ("cube0", 0x3C, 0x3B),
        ("cube0", 0x3F, 0x3B),
        ("cube1", 0x3A, 0x3A),
        ("cube1", 0x3F, 0x3C),
        ("cube2", 0x3A, 0x3B),
        ("cube2", 0x3F, 0x3F),
        ("rover_trx", 0x3A, 0x3C),
        ("rover_trx", 0x3B, 0x3C),
    ],
)
def test_routing_tables(name, final, hop):
    assert node_config(name).next_hop(final) == hop


@pytest.mark.parametrize("name", NODE_NAMES)
def test_node_identity_is_consistent(name):
    config = node_config(name)
    assert config.name == name
    assert config.port == config.network_addr
    assert config.data_link_addr == resolve_data_link_addr(config.network_addr)
    assert config.next_hop(config.network_addr) == config.network_addr


@pytest.mark.parametrize("source", NODE_NAMES)
@pytest.mark.parametrize("dest", NODE_NAMES)
def test_every_route_reaches_its_destination(source, dest):
    by_addr = {node_config(n).network_addr: node_config(n) for n in NODE_NAMES}
    target = node_config(dest).network_addr
    current = node_config(source)
    for _ in range(len(NODE_NAMES)):
        if current.network_addr == target:
            break
        current = by_addr[current.next_hop(target)]
    assert current.network_addr == target


def test_unknown_destination_raises():
    with pytest.raises(RoutingError):
        node_config("cube1").next_hop(0x01)


def test_unknown_node_name_raises():
    with pytest.raises(ValueError):
        node_config("cube9")


def test_custom_node_config_routes():
    config = NodeConfig("lab", 0x01020304, 0x01, 0x01, {0x02: 0x05})
    assert config.next_hop(0x02) == 0x05
    with pytest.raises(RoutingError):
        config.next_hop(0x03)