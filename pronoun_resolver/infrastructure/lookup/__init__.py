from .pronoundb_client import PronounDBClient

__all__ = ["PronounDBClient"]
