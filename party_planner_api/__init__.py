"""
Top-level package for the Party Planner API.

The package provides no public exports; all functionality lives in
submodules under ``app`` (e.g. ``party_planner_api.app.main``).
"""

__all__ = []
