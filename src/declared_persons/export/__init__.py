"""Report persistence helpers."""
