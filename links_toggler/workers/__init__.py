from .convert_vault import ConvertVaultWorker

__all__ = [
    "ConvertVaultWorker",
]
