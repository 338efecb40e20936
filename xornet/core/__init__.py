"""Core numerical primitives for XorNet."""

from . import activations, network, types

__all__ = ["activations", "network", "types"]
