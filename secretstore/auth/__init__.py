"""Caller identification."""
from .clients import Caller, ClientRegistry, ANONYMOUS

__all__ = ["Caller", "ClientRegistry", "ANONYMOUS"]
