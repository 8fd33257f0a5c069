"""Infrastructure layer: settings, logging, backend client and store configuration."""
