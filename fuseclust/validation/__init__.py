"""
Validation module for fuseclust.

This module checks the input views and normalises per-view configuration
before any clustering is run.
"""

from .views import (
    check_views,
    check_k,
    broadcast_k,
    broadcast_parameter,
    check_annotations,
    normalise_view_config,
)

__all__ = [
    'check_views',
    'check_k',
    'broadcast_k',
    'broadcast_parameter',
    'check_annotations',
    'normalise_view_config',
]
