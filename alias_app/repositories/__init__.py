from .alias_repository import AliasRepository

__all__ = ["AliasRepository"]
