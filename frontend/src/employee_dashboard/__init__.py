"""Employee Management dashboard client."""

__version__ = "1.0.0"
