"""Calculator SaaS API: authenticated arithmetic evaluation with per-user history."""

__version__ = "0.1.0"
