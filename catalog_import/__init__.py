"""Product feed import for the storefront catalog."""

__version__ = "0.1.0"
