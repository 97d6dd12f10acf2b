"""Core page-hierarchy engine: trees, breadcrumbs, navigation and titles."""
