"""microwave: a microwave-oven controller whose business rules live in its types."""

__version__ = "0.1.0"
