"""showmethecode: size up a GitHub developer from their repositories."""

__version__ = "0.1.0"
