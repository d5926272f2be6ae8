"""Road network model with candidate search and shortest-path routing for map matching."""

__version__ = "0.1.0"
__all__ = [
    "types",
    "heap",
    "util",
    "network",
    "network_graph",
]