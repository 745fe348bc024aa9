"""
Validation declarations attached to model properties.

A declaration is a neutral (kind, params) pair. Attach them with
``typing.Annotated``::

    Name: Annotated[str, StringLength(2, 40)]

or through dataclass field metadata::

    Email: str = field(default="", metadata={"validators": [EmailAddress()]})

The policy's ``map_validation`` turns declarations into client validators.
"""
from typing import Any, Dict, Optional


class Validation:
    """A validation rule declared on a property."""

    def __init__(self, kind: str, **params: Any):
        self.kind = kind
        self.params: Dict[str, Any] = dict(params)

    def __getattr__(self, name: str) -> Any:
        params = self.__dict__.get("params", {})
        if name in params:
            return params[name]
        raise AttributeError(name)

    def __eq__(self, other):
        if isinstance(other, Validation):
            return self.kind == other.kind and self.params == other.params
        return NotImplemented

    def __hash__(self):
        return hash((self.kind, repr(sorted(self.params.items()))))

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.params.items())
        return f"{type(self).__name__}({self.kind!r}{', ' if args else ''}{args})"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **self.params}


class Required(Validation):
    def __init__(self, allow_empty_strings: bool = False):
        super().__init__("required", allow_empty_strings=allow_empty_strings)


class MaxLength(Validation):
    def __init__(self, length: int):
        super().__init__("maxLength", max_length=length)


class MinLength(Validation):
    def __init__(self, length: int):
        super().__init__("minLength", min_length=length)


class StringLength(Validation):
    """Length range; a policy may expand it into minLength and maxLength validators."""

    def __init__(self, max_length: int, min_length: int = 0):
        super().__init__("stringLength", min_length=min_length, max_length=max_length)


class Range(Validation):
    def __init__(self, minimum: Optional[Any] = None, maximum: Optional[Any] = None):
        super().__init__("range", minimum=minimum, maximum=maximum)


class RegularExpression(Validation):
    def __init__(self, pattern: str):
        super().__init__("regularExpression", pattern=pattern)


class EmailAddress(Validation):
    def __init__(self):
        super().__init__("emailAddress")


class Url(Validation):
    def __init__(self):
        super().__init__("url")
