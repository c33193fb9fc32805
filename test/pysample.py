""" Python classes described by the introspection tests """

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Generic, List, Optional, Set, Tuple, TypeVar, Union

T = TypeVar('T')


class Color(Enum):
    RED = 'red'
    GREEN = 'green'


class Size(Enum):
    SMALL = 1
    LARGE = 2


@dataclass
class Address:
    street: str
    zip_code: Optional[str] = None


N = TypeVar('N', bound=Address)


@dataclass
class Customer:
    name: str
    age: int
    score: float
    active: bool
    address: Address
    tags: List[str]
    favourite: Color
    ratings: Dict[str, float]
    nicknames: Set[str]
    notes: Optional[List[Optional[str]]] = None
    _secret: str = ''
    legacy_id: str = field(default='', metadata={'deprecated': 'use name'})


@dataclass
class Box(Generic[T]):
    content: T
    items: List[T]


@dataclass
class AddressBox(Box[Address]):
    label: str = ''


@dataclass
class Shipment(Generic[N]):
    destination: N


@dataclass
class Invoice:
    amount: float

    @property
    def total(self) -> float:
        return self.amount

    def apply_discount(self, percent: float) -> None:
        self.amount -= self.amount * percent / 100


@dataclass
class Oddities:
    anything: Any
    either: Union[int, str]
    coordinates: Tuple[float, ...]
    pair: Tuple[int, str]
    codes: FrozenSet[int]
    by_size: Dict[Size, int]
    callback: Callable[[int], str]


class Person:
    __ts_name__ = 'Human'

    name: str
    friends: 'List[Person]'
