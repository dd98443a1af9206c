"""Dictionary ingestion and relationship normalization engine."""

__version__ = "0.1.0"
