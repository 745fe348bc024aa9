"""Mapping of Python property types to metadata data types."""
import datetime
import decimal
import typing
import uuid
from enum import Enum
from typing import Optional


class DataType(str, Enum):
    """Data types understood by metadata consumers"""
    STRING = "String"
    INT64 = "Int64"
    DOUBLE = "Double"
    DECIMAL = "Decimal"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    TIME = "Time"
    GUID = "Guid"
    BINARY = "Binary"


# Order matters: bool is a subclass of int and datetime of date.
TYPE_MAPPING = (
    (bool, DataType.BOOLEAN),
    (int, DataType.INT64),
    (float, DataType.DOUBLE),
    (decimal.Decimal, DataType.DECIMAL),
    (str, DataType.STRING),
    (bytes, DataType.BINARY),
    (bytearray, DataType.BINARY),
    (datetime.datetime, DataType.DATETIME),
    (datetime.date, DataType.DATETIME),
    (datetime.time, DataType.TIME),
    (datetime.timedelta, DataType.TIME),
    (uuid.UUID, DataType.GUID),
)

INTEGER_TYPES = frozenset({DataType.INT64})


def is_enum_type(py_type) -> bool:
    if not isinstance(py_type, type) or typing.get_origin(py_type) is not None:
        return False
    return issubclass(py_type, Enum)


def data_type_for(py_type) -> Optional[DataType]:
    """
    Return the data type for a Python type.

    Enums map to String. Returns None for anything the vocabulary cannot
    express (classes, containers, unions).
    """
    if not isinstance(py_type, type) or typing.get_origin(py_type) is not None:
        return None
    if is_enum_type(py_type):
        return DataType.STRING
    for candidate, data_type in TYPE_MAPPING:
        if issubclass(py_type, candidate):
            return data_type
    return None


def is_compatible(data_type: Optional[DataType], other: Optional[DataType]) -> bool:
    """Check whether a foreign key of one type can hold a key of the other."""
    if data_type == other:
        return True
    return data_type in INTEGER_TYPES and other in INTEGER_TYPES
