"""Test configuration and fixtures for the Geo User Directory."""

from tests.fixtures import *  # noqa: F401,F403
