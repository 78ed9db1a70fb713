"""A layered radio network stack for small data-cube nodes: radio, data link, network, transport, LED control and a message log."""

__version__ = "0.1.0"