"""CV coach: résumé scoring, optimization and interview prep over a hosted analysis service."""

__version__ = "0.1.0"
