"""Configuration, logging, sealing and authorization primitives."""
