"""
Core utilities for AFFiNE Cloud.

This package provides core functionality including logging configuration,
monitoring, the user-friendly error taxonomy and database setup.
"""

from affine_cloud.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
