"""Manifest transformers, filters and reconcile stages for Knative installations."""

__version__ = "0.1.0"