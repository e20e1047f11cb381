"""Provider configuration."""
