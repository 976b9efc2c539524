"""Settings for upload-binder, read from the environment and .env."""

import importlib.metadata
import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).parent.parent.parent
PACKAGE_NAME = "upload-binder"


def read_project_table(pyproject_path: Path) -> dict:
    """Return the [project] table of pyproject.toml, empty when the file is absent."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle).get("project", {})


def get_version(base_dir: Path) -> str:
    """Latest git tag, else the installed distribution version, else 0.0.0."""
    try:
        import git
    except ImportError:
        # GitPython refuses to import without a git executable
        git = None

    if git is not None:
        try:
            repo = git.Repo(base_dir, search_parent_directories=True)
            latest_tag = max(repo.tags, key=lambda t: t.commit.committed_datetime, default=None)
            if latest_tag:
                return str(latest_tag)
        except (git.exc.GitError, ValueError):
            pass

    try:
        return importlib.metadata.version(PACKAGE_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


class Settings(BaseSettings):
    """Service settings; ClassVars are derived from the project, never from env."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    PROJECT: ClassVar[dict] = read_project_table(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("name", PACKAGE_NAME)
    API_DESCRIPTION: ClassVar[str] = PROJECT.get("description", "Multipart upload binding")
    API_VERSION: ClassVar[str] = get_version(BASE_DIR)

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Routes
    UPLOADS_ROUTE_PREFIX: str = "/files"

    @property
    def api_url(self) -> str:
        return f"http://{self.API_HOST}:{self.API_PORT}"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
