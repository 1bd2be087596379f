"""Upstream feed access: HTTP fetchers and the process-lifetime cache."""
