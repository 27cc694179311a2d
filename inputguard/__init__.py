"""inputguard: sanitization and validation of untrusted user input."""

__version__ = "0.1.0"
