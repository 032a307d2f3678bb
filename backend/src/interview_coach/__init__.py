"""Interview Coach: interview answer evaluation backend."""
