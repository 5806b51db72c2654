"""Shared building blocks: constants, errors, logging and protocols."""
