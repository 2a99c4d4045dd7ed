"""Coded errors with scoped catching, logging, tracked resources, reference-counted buffers, formatting and ELF symbol lookup."""

__version__ = "1.0.0"