"""QRadar Lookup: IP offense lookups against the IBM QRadar REST API.

This package provides an async client for the QRadar offense API, a lookup
pipeline that filters and shapes offenses per IP entity, and a small CLI.
"""

__version__ = "0.3.0"
