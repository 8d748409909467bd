"""EntityIndex: id lookup over a snapshot collection."""

from typing import Callable, Dict, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")


class EntityIndex(Generic[T]):
    """
    Map of id -> record built once per snapshot.

    Records without a key are kept for iteration but are not indexed.
    Later records with a duplicate key replace earlier ones.
    """

    def __init__(
        self,
        records: Optional[Iterable[T]] = None,
        key: Callable[[T], Optional[str]] = lambda r: getattr(r, "id", None),
    ):
        self._records = list(records or [])
        self._by_key: Dict[str, T] = {}
        for record in self._records:
            k = key(record)
            if k is not None:
                self._by_key[k] = record

    def get(self, key: Optional[str]) -> Optional[T]:
        if key is None:
            return None
        return self._by_key.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(self._records)

    def keys(self):
        return self._by_key.keys()
