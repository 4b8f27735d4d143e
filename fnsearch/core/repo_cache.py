"""
Local cache of package repositories.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import git

from .catalog import find_git_url
from .config import get_settings
from ..models.package import PackageMetadata

logger = logging.getLogger(__name__)

GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


class RepoSyncError(RuntimeError):
    """A package repository could not be cloned or updated."""


def get_repo_path(package: PackageMetadata, cache_dir: Union[str, Path]) -> Path:
    """Checkout location of a package: ``<cache_dir>/<author>/<project>``."""
    root = Path(cache_dir).resolve()
    path = (root / package.author / package.project).resolve()
    if root not in path.parents:
        raise RepoSyncError(f"Invalid path for package {package.name}")
    return path


def sync_repo(
    package: PackageMetadata,
    cache_dir: Union[str, Path],
    git_url: Optional[str] = None
) -> Path:
    """
    Clone a package repository, or update it if it is already cached.

    Both operations use a depth-1 history and never prompt for credentials.

    Returns:
        Path of the working tree

    Raises:
        RepoSyncError: if git fails
    """
    repo_path = get_repo_path(package, cache_dir)
    timeout = get_settings().git_timeout

    try:
        if repo_path.exists():
            logger.info(f"Updating {package.name} in {repo_path}")
            repo = git.Repo(repo_path)
            with repo.git.custom_environment(**GIT_ENV):
                repo.git.pull("--depth", "1", kill_after_timeout=timeout)
        else:
            url = git_url or find_git_url(package)
            logger.info(f"Cloning {package.name} from {url}")
            repo_path.parent.mkdir(parents=True, exist_ok=True)
            git.Repo.clone_from(url, repo_path, depth=1, env=GIT_ENV)
        return repo_path

    except (git.GitCommandError, git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
        logger.error(f"Failed to sync {package.name}: {e}")
        raise RepoSyncError(f"Failed to sync {package.name}: {e}") from e
