# /medshare/utils/result.py
from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar, Union

from medshare.utils.errors import ErrorKind

T = TypeVar('T')


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str = ''
    ok: ClassVar[bool] = False


Result = Union[Ok[T], Err]
