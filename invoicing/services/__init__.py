"""Service layer for invoice mutations."""
