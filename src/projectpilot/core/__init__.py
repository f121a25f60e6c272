"""Core services: configuration, logging, privacy, persistence and the session engine."""
