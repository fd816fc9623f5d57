from collections.abc import Iterable
from review_relay.models.review import ExistingAnnotation, LocationKey


class LocationIndex:
    """Set of (file_path, line_number) pairs that already carry an inline comment.

    Built once per run from the platform's existing annotations, then grown as
    the run claims new locations. Keys match exactly; path normalization is the
    platform adapter's job.
    """

    def __init__(self, keys: Iterable[LocationKey] = ()):
        self._keys: set[LocationKey] = set(keys)

    @classmethod
    def build(cls, annotations: Iterable[ExistingAnnotation]) -> "LocationIndex":
        index = cls()
        for annotation in annotations:
            if annotation.file_path and annotation.line_number is not None:
                index.add((annotation.file_path, annotation.line_number))
        return index

    def contains(self, key: LocationKey) -> bool:
        return key in self._keys

    def add(self, key: LocationKey) -> None:
        self._keys.add(key)

    def __contains__(self, key: LocationKey) -> bool:
        return self.contains(key)

    def __len__(self) -> int:
        return len(self._keys)
