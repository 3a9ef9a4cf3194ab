from .DataTransferObject import DataTransferObject, DataTransfertObject, PropertyInfo, Var

__all__ = ["DataTransferObject", "DataTransfertObject", "PropertyInfo", "Var"]
