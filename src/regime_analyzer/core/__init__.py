"""Core domain: models, rules and analyzers."""
