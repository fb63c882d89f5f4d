"""Geo User Directory.

A small HTTP directory of users whose latitude, longitude and timezone are
derived from their postal code.
"""

__version__ = "0.1.0"
