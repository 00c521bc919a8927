"""Resource path resolution relative to a provider root."""

from dataclasses import dataclass

SEPARATOR = "/"

TABLE_LEVEL = 1
ROW_LEVEL = 2


def ensure_trailing_slash(path: str) -> str:
    if path.endswith(SEPARATOR):
        return path
    return path + SEPARATOR


def relativize(root_path: str, path: str) -> str:
    """Strip the root prefix from path.

    Paths outside the root are returned unchanged and treated as already
    relative. The root itself (with or without its trailing separator)
    relativizes to an empty string.
    """
    if path.startswith(root_path):
        return path[len(root_path) :]
    if path == root_path.rstrip(SEPARATOR):
        return ""
    return path


def resolve(root_path: str, path: str) -> tuple[str, ...]:
    """Split path into segments beneath root_path.

    Trailing empty segments are dropped, so ``accounts/`` and ``accounts``
    resolve alike and the root resolves to no segments at all.
    """
    segments = relativize(root_path, path).split(SEPARATOR)
    while segments and not segments[-1]:
        segments.pop()
    return tuple(segments)


@dataclass(frozen=True)
class ResourcePath:
    """A path parsed against a root, built per request."""

    path: str
    relative: str
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, root_path: str, path: str) -> "ResourcePath":
        return cls(
            path=path,
            relative=relativize(root_path, path),
            segments=resolve(root_path, path),
        )

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def is_table(self) -> bool:
        return len(self.segments) == TABLE_LEVEL

    @property
    def is_row(self) -> bool:
        return len(self.segments) == ROW_LEVEL

    @property
    def is_record_path(self) -> bool:
        """True when the relative part names something below a table."""
        return SEPARATOR in self.relative

    @property
    def table_name(self) -> str | None:
        return self.segments[0] if self.segments else None

    @property
    def row_key(self) -> str | None:
        return self.segments[1] if self.is_row else None
