"""Job-description-driven resume customization."""

__version__ = "0.1.0"
