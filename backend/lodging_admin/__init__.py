"""Lodging operations backend: CSV reservation import and weekly metrics."""
