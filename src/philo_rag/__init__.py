"""PHILO RAG ingestion backend.

PDF uploads are parsed, split into overlapping chunks, embedded through an
external embedding API and stored one row per chunk in a vector table.
"""

__version__ = "0.1.0"
