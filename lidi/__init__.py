"""One-way data transfer over a network diode."""

__version__ = "0.1.0"