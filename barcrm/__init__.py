"""Member points domain model: accounts, value objects, calculation and events."""

__version__ = "1.0.0"