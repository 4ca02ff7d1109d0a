"""Core domain: ports, pure analytics services and observability."""
