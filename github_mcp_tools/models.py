"""Data models and constants for the operation gateway."""

from dataclasses import dataclass

PUBLIC_HOST = "github.com"
DEFAULT_TIMEOUT = 15  # PyGithub's own default, in seconds
PER_PAGE = 100

# Default limits applied when a caller omits `limit` (or passes <= 0)
DEFAULT_LIST_LIMIT = 30
DEFAULT_COMMIT_LIST_LIMIT = 30
DEFAULT_SEARCH_LIMIT = 10
DEFAULT_CODE_SEARCH_LIMIT = 20
DEFAULT_COMMIT_SEARCH_LIMIT = 20

SNIPPET_LENGTH = 200


@dataclass(frozen=True)
class GitHubEnv:
    """Configuration resolved for a single gateway call."""

    token: str
    host: str = PUBLIC_HOST
    repository: str | None = None
    timeout: int = DEFAULT_TIMEOUT
    verify_token: bool = False

    @property
    def is_enterprise(self) -> bool:
        return bool(self.host) and self.host not in (PUBLIC_HOST, f"https://{PUBLIC_HOST}")


@dataclass(frozen=True)
class RepositoryRef:
    """An owner/name pair identifying the repository an operation acts on."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, value: str) -> "RepositoryRef":
        owner, sep, name = value.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Repository must be in 'owner/repo' format, got {value!r}")
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return self.full_name
