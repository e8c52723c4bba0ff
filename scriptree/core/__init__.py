"""Core models, policies and the build pipeline."""
