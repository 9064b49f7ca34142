"""Blueprint-backed feature modules."""
