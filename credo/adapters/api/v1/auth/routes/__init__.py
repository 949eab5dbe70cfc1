"""Subpackage aggregating individual auth route modules."""
