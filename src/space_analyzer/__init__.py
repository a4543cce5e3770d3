"""SpaceAnalyzer package initialisation."""

__all__ = [
    "core",
    "metadata",
    "drives",
    "reporting",
    "server",
    "shared",
]
