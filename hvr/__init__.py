"""Registry for versioned Hamilton Venus libraries: server, client, storage and dependency resolution."""

__version__ = "0.1.0"