"""Feeds, overrides, shadow templates, selectors and kubeconfig helpers for multi-cluster applications."""

__version__ = "0.1.0"