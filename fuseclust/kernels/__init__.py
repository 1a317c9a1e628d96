"""
Kernels module for fuseclust.

This module turns consensus matrices into valid kernels and combines
several kernels with per-observation weights.
"""

from .kernels import (
    spectrum_shift,
    is_positive_semidefinite,
    combine_kernels,
    kernel_to_distance,
)

__all__ = [
    'spectrum_shift',
    'is_positive_semidefinite',
    'combine_kernels',
    'kernel_to_distance',
]
