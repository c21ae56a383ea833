"""Internal helpers shared across xlflow modules."""
