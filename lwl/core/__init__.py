"""Domain logic with no database or HTTP dependencies."""
