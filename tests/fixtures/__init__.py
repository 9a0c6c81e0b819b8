"""Shared pytest fixtures for libros-api tests."""
