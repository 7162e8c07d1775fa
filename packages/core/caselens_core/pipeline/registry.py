"""Registry of submitted sources."""

from collections.abc import Iterator

from caselens_core.errors import ArtifactNotFoundError
from caselens_core.schemas.sources import Source


class SourceRegistry:
    """Ordered collection of sources keyed by their unique id."""

    def __init__(self) -> None:
        self._sources: dict[str, Source] = {}

    def add(self, source: Source) -> Source:
        if source.id in self._sources:
            raise ValueError(f"Duplicate source id: {source.id}")
        self._sources[source.id] = source
        return source

    def remove(self, source_id: str) -> Source:
        try:
            return self._sources.pop(source_id)
        except KeyError:
            raise ArtifactNotFoundError(f"Unknown source: {source_id}") from None

    def get(self, source_id: str) -> Source:
        try:
            return self._sources[source_id]
        except KeyError:
            raise ArtifactNotFoundError(f"Unknown source: {source_id}") from None

    def as_list(self) -> list[Source]:
        return list(self._sources.values())

    def clear(self) -> None:
        self._sources.clear()

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[Source]:
        return iter(self.as_list())
