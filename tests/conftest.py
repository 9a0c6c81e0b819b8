"""Test configuration and fixtures for libros-api."""

pytest_plugins = ["tests.fixtures.libros"]
