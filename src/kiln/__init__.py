"""kiln - static site builder with breadcrumb and navigation derivation."""

__version__ = "0.1.0"
