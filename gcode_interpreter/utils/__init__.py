"""Error types and input source helpers."""
