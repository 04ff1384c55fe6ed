"""Database base class and session helpers."""
