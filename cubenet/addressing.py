"""Node addresses, address resolution and per-node routing tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

_DATA_LINK_ADDRESSES: Mapping[int, int] = MappingProxyType(
    {
        0x3A: 0x3A3A3A3A,
        0x3B: 0x3B3B3B3B,
        0x3C: 0x3C3C3C3C,
        0x3F: 0x3F3F3F3F,
    }
)


class RoutingError(LookupError):
    """Raised when a node has no route to a destination."""


@dataclass(frozen=True)
class NodeConfig:
    """Identity and routing table of one node in the network."""

    name: str
    data_link_addr: int
    network_addr: int
    port: int
    routes: Mapping[int, int] = field(hash=False)

    def next_hop(self, final_addr: int) -> int:
        """Network address of the neighbour to hand a packet for ``final_addr`` to."""
        try:
            return self.routes[final_addr]
        except KeyError:
            raise RoutingError(
                f"{self.name} has no route to {final_addr:#04x}"
            ) from None


def resolve_data_link_addr(network_addr: int) -> int:
    """Map a one-byte network address to its four-byte data link address."""
    return _DATA_LINK_ADDRESSES.get(network_addr, network_addr)


def resolve_network_addr(port: int) -> int:
    """Map a port to the network address of the node that owns it.

    Ports are globally unique, so the owning node is found by its port; a
    port that no known node owns maps to the network address of equal value.
    """
    if not 0 <= port <= 0xFF:
        raise ValueError(f"port {port} does not fit in one byte")
    for node in _NODES.values():
        if node.port == port:
            return node.network_addr
    return port


def _node(name: str, addr: int, routes: dict[int, int]) -> NodeConfig:
    return NodeConfig(
        name=name,
        data_link_addr=_DATA_LINK_ADDRESSES[addr],
        network_addr=addr,
        port=addr,
        routes=MappingProxyType(dict(routes)),
    )


_NODES: Mapping[str, NodeConfig] = MappingProxyType(
    {
        "cube0": _node("cube0", 0x3A, {0x3A: 0x3A, 0x3B: 0x3B, 0x3C: 0x3B, 0x3F: 0x3B}),
        "cube1": _node("cube1", 0x3B, {0x3A: 0x3A, 0x3B: 0x3B, 0x3C: 0x3C, 0x3F: 0x3C}),
        "cube2": _node("cube2", 0x3C, {0x3A: 0x3B, 0x3B: 0x3B, 0x3C: 0x3C, 0x3F: 0x3F}),
        "rover_trx": _node(
            "rover_trx", 0x3F, {0x3A: 0x3C, 0x3B: 0x3C, 0x3C: 0x3C, 0x3F: 0x3F}
        ),
    }
)


def node_config(name: str) -> NodeConfig:
    """Configuration of the named node: cube0, cube1, cube2 or rover_trx."""
    try:
        return _NODES[name]
    except KeyError:
        known = ", ".join(sorted(_NODES))
        raise ValueError(f"unknown node {name!r}; expected one of {known}") from None