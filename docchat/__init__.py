"""Document chat service: grounded answers over uploaded documents."""

__version__ = "0.1.0"
