"""
fluentkit

Laravel-style collections, array helpers and data transfer objects.
"""

from fluentkit.Exceptions import (
    BadMethodCallException,
    FluentKitException,
    InvalidArgumentException,
    ItemNotFoundException,
    MultipleItemsFoundException,
)
from fluentkit.Support.Helpers import data_forget, data_get, data_set, enum_value, value
from fluentkit.Iterable.Arr import Arr
from fluentkit.Support.Config import ConfigRepository, config, env
from fluentkit.Log import get_logger
from fluentkit.Support.Macroable import Macroable
from fluentkit.Support.Conditionable import Conditionable
from fluentkit.Iterable.Collection import Collection, SortFlag, collect
from fluentkit.Iterable.LazyCollection import LazyCollection, lazy
from fluentkit.Support.Fluent import Fluent
from fluentkit.Data import DataTransferObject, DataTransfertObject, Var

__version__ = "1.0.0"

__all__ = [
    "Arr",
    "BadMethodCallException",
    "Collection",
    "Conditionable",
    "ConfigRepository",
    "DataTransferObject",
    "DataTransfertObject",
    "Fluent",
    "FluentKitException",
    "InvalidArgumentException",
    "ItemNotFoundException",
    "LazyCollection",
    "Macroable",
    "MultipleItemsFoundException",
    "SortFlag",
    "Var",
    "collect",
    "config",
    "data_forget",
    "data_get",
    "data_set",
    "enum_value",
    "env",
    "get_logger",
    "lazy",
    "value",
]
