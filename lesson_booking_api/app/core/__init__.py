"""Configuration, logging, error types and the document store gateway."""
