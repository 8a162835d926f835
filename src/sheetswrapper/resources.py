from dataclasses import asdict,fields,is_dataclass
from typing import Any

class GoogleSheetsResourceBase():
    """
    Intended to be subclassed by a dataclass but isnt actually a dataclass.
    Subclasses hook fixup() to coerce fields after init or update.
    """
    @classmethod
    def from_base(cls, base: dict|None):
        """
        The missing inverse of asdict().  The API adds fields over time so
        anything we don't model is dropped rather than blowing up __init__.
        Nested resources are handled by each subclass fixup().
        """
        if isinstance(base, cls):
            return base
        known = {f.name for f in fields(cls)} if is_dataclass(cls) else set()
        return cls(**{k: v for k,v in dict(base or {}).items() if k in known})

    def to_base(self) -> dict:
        """
        Default just return the dict representation of the object as needed by
        the sheets client.  Something more complicated can override.
        Also with a common base makes it easy to filter with isinstance.
        Call fixup() first to ensure all fields are in correct format.
        """
        self.fixup()
        return asdict(self)

    def trim(self) -> dict:
        """
        Return a 'trimmed' dict of the resource.  That is, removing any attributes
        that are empty or None, all the way down.  Numbers and bools are kept even
        when falsy as 0 and False are real values.
        This is for requests that only want filled-in fields, a cell with an empty
        'userEnteredFormat' would otherwise wipe the cell format.
        """
        return _trim_value(self.to_base()) or {}

    def fixup(self) -> None:
        """
        notify a subclass to do any field adjustments
        """
        pass

def _trim_value(value: Any) -> Any:
    if isinstance(value, dict):
        trimmed = {}
        for k,v in value.items():
            t = _trim_value(v)
            if t is None or (type(t) not in [int,bool,float] and not t):
                continue
            trimmed[k] = t
        return trimmed
    if isinstance(value, list):
        return [_trim_value(v) for v in value]
    return value
