"""
OpenSearch index cleaner.

Deletes stale date-suffixed indices from managed OpenSearch services
following a YAML rules file, and reports pre-cleanup index sizes to a
webhook.
"""

__version__ = "0.1.0"
