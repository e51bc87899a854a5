"""Adapters running application code inside a correlation scope."""

from .generic import run_with_generic_context

__all__ = ["run_with_generic_context"]
