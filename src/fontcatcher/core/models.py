"""Pydantic models for repository descriptors and catalog payloads."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import EmptyRepositoryFieldError, InvalidRepositoryNameError

API_KEY_PLACEHOLDER = "{API_KEY}"


class Repository(BaseModel):
    """Static description of a remote font catalog."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique repository name")
    url: str = Field(..., description="Catalog URL, may contain {API_KEY}")
    key: str | None = Field(None, description="Secret substituted into the URL", repr=False)

    @field_validator("name", "url")
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise EmptyRepositoryFieldError(info.field_name)
        return v.strip()

    @field_validator("name")
    @classmethod
    def file_safe_name(cls, v: str) -> str:
        if "/" in v or "\\" in v or v.startswith("."):
            raise InvalidRepositoryNameError(v)
        return v

    @property
    def requires_key(self) -> bool:
        return API_KEY_PLACEHOLDER in self.url

    def resolved_url(self) -> str:
        """Return the catalog URL with the API key substituted."""
        if self.key and self.requires_key:
            return self.url.replace(API_KEY_PLACEHOLDER, self.key)
        return self.url

    @property
    def cache_filename(self) -> str:
        return f"{self.name}.json"

    def __repr__(self) -> str:
        masked = "'***'" if self.key else "None"
        return f"Repository(name='{self.name}', url='{self.url}', key={masked})"


class RepoFont(BaseModel):
    """One family as published by one repository."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    kind: str | None = None
    family: str = Field(..., min_length=1)
    variants: list[str] = Field(default_factory=list)
    subsets: list[str] | None = None
    version: str | None = None
    last_modified: str | None = Field(None, alias="lastModified")
    files: dict[str, str] = Field(default_factory=dict)
    commentary: str | None = None
    creator: str | None = None

    @property
    def ordered_files(self) -> list[tuple[str, str]]:
        """(variant, url) pairs, declared variants first."""
        pairs = [(v, self.files[v]) for v in self.variants if v in self.files]
        pairs.extend((v, url) for v, url in self.files.items() if v not in self.variants)
        return pairs


class FontsList(BaseModel):
    """Catalog payload envelope as served by a repository."""

    model_config = ConfigDict(extra="ignore")

    kind: str | None = None
    items: list[RepoFont] = Field(default_factory=list)
