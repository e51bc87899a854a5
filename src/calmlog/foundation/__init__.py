"""Foundation: error types and environment settings.

``calmlog.foundation.config`` depends on the core and is imported on demand.
"""
