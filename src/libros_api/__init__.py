"""HTTP resource server for libros backed by a relational table.

The package exposes CRUD handlers over a single ``libros`` table, generated
Swagger documentation, and the configuration, logging and storage plumbing
around them.
"""

__version__ = "1.0.0"
