"""Service layer for lwlnow."""
