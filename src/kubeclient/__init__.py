"""Kubernetes API client: kubeconfig resolution, resource routing and watch decoding."""

__version__ = "0.1.0"
