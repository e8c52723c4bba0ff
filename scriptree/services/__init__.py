"""Settings persistence and sample tree generation."""
