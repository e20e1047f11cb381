"""imgixyz - infrastructure-as-code provider for imgix sources."""

__version__ = "0.1.0"
