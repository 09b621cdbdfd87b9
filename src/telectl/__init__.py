"""telectl - plugin administration for a remote telemetry service."""

__version__ = "0.1.0"
