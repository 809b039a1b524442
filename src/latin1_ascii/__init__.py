"""Convert Latin-1 high-bit characters in a text region to 7-bit ASCII."""

__version__ = "0.1.0"
