from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, Union


class Collection:
    """Ordered key/value container for traversing decoded JSON documents.

    A mapping keeps its keys; a sequence is indexed by position. Every
    transforming method returns a new ``Collection``.

    Examples:
        ```python
        users = client.get("/users").collect("data")
        names = users.pluck("name").to_list()
        ```
    """

    def __init__(self, items: Union[Mapping[Any, Any], Sequence[Any], None] = None):
        if items is None:
            self._items: dict[Any, Any] = {}
        elif isinstance(items, Mapping):
            self._items = dict(items)
        elif isinstance(items, (str, bytes)):
            self._items = {0: items}
        else:
            self._items = dict(enumerate(items))

    def all(self) -> dict[Any, Any]:
        return dict(self._items)

    def get(self, key: Any, default: Any = None) -> Any:
        return self._items.get(key, default)

    def has(self, key: Any) -> bool:
        return key in self._items

    def keys(self) -> list[Any]:
        return list(self._items.keys())

    def values(self) -> list[Any]:
        return list(self._items.values())

    def count(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def first(
        self, callback: Optional[Callable[[Any], bool]] = None, default: Any = None
    ) -> Any:
        for value in self._items.values():
            if callback is None or callback(value):
                return value
        return default

    def last(
        self, callback: Optional[Callable[[Any], bool]] = None, default: Any = None
    ) -> Any:
        for value in reversed(list(self._items.values())):
            if callback is None or callback(value):
                return value
        return default

    def map(self, callback: Callable[[Any], Any]) -> "Collection":
        return self._new({key: callback(value) for key, value in self._items.items()})

    def filter(self, callback: Optional[Callable[[Any], bool]] = None) -> "Collection":
        predicate = callback or bool
        return self._new(
            {key: value for key, value in self._items.items() if predicate(value)}
        )

    def pluck(self, field: Any) -> "Collection":
        """Collect ``field`` from every mapping item that has it."""
        return Collection(
            [
                value[field]
                for value in self._items.values()
                if isinstance(value, Mapping) and field in value
            ]
        )

    def to_list(self) -> list[Any]:
        return list(self._items.values())

    def to_dict(self) -> dict[Any, Any]:
        return self.all()

    def _new(self, items: dict[Any, Any]) -> "Collection":
        if self._is_list():
            return Collection(list(items.values()))
        return Collection(items)

    def _is_list(self) -> bool:
        return list(self._items.keys()) == list(range(len(self._items)))

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __getitem__(self, key: Any) -> Any:
        return self._items[key]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Collection):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"Collection({self._items!r})"
