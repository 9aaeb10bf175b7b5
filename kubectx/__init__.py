"""Tools for switching Kubernetes contexts and namespaces in a kubeconfig file."""

__version__ = "0.1.0"