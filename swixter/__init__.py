"""Switch coding CLIs between AI providers with named profiles."""

__version__ = "0.3.0"
