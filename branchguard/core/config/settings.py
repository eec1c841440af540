"""Application settings loaded from the environment."""

from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from branchguard.core.config.enums import Environment


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Settings(BaseSettings):
    """Process-wide settings.

    The ``BRANCH_*`` values seed the branch restriction config. They are read
    once at startup and turned into an immutable ``BranchConfig`` by
    ``branchguard.domains.branches.config.load_branch_config``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "branchguard"
    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite+aiosqlite:///./branchguard.db"
    DB_POOL_SIZE: int = 5
    DB_POOL_MAX_OVERFLOW: int = 10

    ADMIN_URL: str = "/admin/"
    USER_ADMIN_PROCESS: str = "ProcessUser"

    BRANCH_MATCH_TYPE: str = "disabled"
    BRANCH_BRANCHES_PARENT_ID: Optional[int] = None
    BRANCH_UNMATCHED_POLICY: str = "all"
    BRANCH_RESTRICT_SCOPE: str = "editing_and_view"
    BRANCH_EXCLUSIONS: Annotated[List[int], NoDecode] = Field(default_factory=list)
    BRANCH_RESTRICT_FROM_SEARCH: bool = False
    BRANCH_MODIFY_BREADCRUMBS: bool = False
    BRANCH_TREE_ROOT_ID: int = 1
    BRANCH_RESERVED_PATHS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["/admin/repeaters/"]
    )

    @field_validator("BRANCH_EXCLUSIONS", "BRANCH_RESERVED_PATHS", mode="before")
    @classmethod
    def _parse_csv(cls, value: Any) -> Any:
        """Accept comma-separated env values as well as real lists."""
        return _split_csv(value)

    @property
    def is_local(self) -> bool:
        """Whether the service runs on a developer machine."""
        return self.ENVIRONMENT in (Environment.LOCAL, Environment.TEST)
