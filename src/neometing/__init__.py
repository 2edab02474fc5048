"""neo-meting: provider-agnostic music metadata gateway."""

__version__ = "0.1.0"
