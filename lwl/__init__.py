"""lwlnow backend package."""
