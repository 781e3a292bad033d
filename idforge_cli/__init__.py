"""Command line for the idforge codecs and identifier generators.

Each subcommand prints one JSON object whose ``kind`` names the command, so
output can be piped to other tools; errors go to stderr as a single line.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
