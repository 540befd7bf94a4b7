"""Runtime primitives: 32-bit integers, math, random numbers, digests, serialization, files, strings and processes."""

__version__ = "0.1.0"