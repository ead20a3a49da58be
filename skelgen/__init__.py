"""skelgen - reflection-driven PHPUnit test skeleton generator."""

__version__ = "0.1.0"
