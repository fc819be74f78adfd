"""
Ingestion: chunking, chunk statistics, embedding and persistence.

This package turns parsed PDF text into overlapping chunks, either
summarised for a dry-run preview or embedded and stored one row per chunk.
"""
