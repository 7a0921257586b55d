"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (users, posts, events, participations, etc.)
has a service in ``services`` and a router defined in
``api/v1/endpoints``.  Versioning is handled by grouping routers under
the ``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
