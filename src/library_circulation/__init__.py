"""
Library Circulation package.

An in-memory library: books, patrons and branches in a SQLAlchemy entity
store, lending and FIFO reservation queues, recommendations, and
notification fan-out, served over MCP.

Key Components:
- models: Pydantic models for every entity
- database: SQLAlchemy schema, session management and repositories
- services: lending, reservation, recommendation and management services
- library: the facade wiring everything together
- tools / resources: the MCP surface
"""

__version__ = "0.1.0"

from .errors import LibraryError
from .library import Library, get_library, reset_library

__all__ = [
    "Library",
    "LibraryError",
    "__version__",
    "get_library",
    "reset_library",
]
