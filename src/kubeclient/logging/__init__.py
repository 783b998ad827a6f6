"""Logging configuration for kubeclient."""

from kubeclient.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
