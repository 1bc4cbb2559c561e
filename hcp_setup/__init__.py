"""Install the HCP CLI on a CI runner."""

__version__ = "0.1.0"
