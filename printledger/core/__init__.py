"""Core domain layer: entities, ports, pure services and exceptions."""
