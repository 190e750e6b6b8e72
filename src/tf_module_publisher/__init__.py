"""
Terraform Module Publisher - Versioned module archives on Google Cloud Storage.

Packages a Terraform module directory, uploads it under a semantic
version and prunes older versions beyond a retention count.
"""

__version__ = "0.1.0"

# Configuration is not exported by default
# Import explicitly: from tf_module_publisher.core.config import load_options

__all__ = []
