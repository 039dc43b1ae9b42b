"""SecretStore - scoped, expiring secret storage service."""

__version__ = "0.1.0"
