"""Error hierarchy for connection metadata discovery.

Listing operations recover from `IntrospectionUnavailable` and
`ObjectLookupFailure` locally and degrade to empty results. `UsageError` and
`CollaboratorFailure` always reach the caller.
"""

from __future__ import annotations


class DbPaneError(RuntimeError):
    """Base class for all db-pane errors."""


class UsageError(DbPaneError, ValueError):
    """Raised when a caller violates a precondition (before any I/O)."""


class IntrospectionUnavailable(DbPaneError):
    """Raised when a backend lacks a catalog/schema concept or the probe fails."""


class ObjectLookupFailure(DbPaneError):
    """Raised when table or column introspection for a named object fails."""


class CollaboratorFailure(DbPaneError):
    """Raised when the connection is broken or a preview query fails."""


class AuthError(DbPaneError):
    """Raised when Databricks authentication fails."""
