"""Catalog listing filtered by seller delivery radius."""
