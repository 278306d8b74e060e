"""Zone-based malloc/free/realloc over a simulated address space, with an allocation report."""

__version__ = "0.1.0"
__all__ = ["__version__"]