"""Cache service for remembering merged pull requests between runs."""
import json
import hashlib
import logging
from pathlib import Path
from typing import Dict, Optional
from datetime import datetime

logger = logging.getLogger(__name__)


class CacheService:
    """Persists which branches have a merged pull request, with its URL.

    A merged PR never changes state again, so these are the only PR facts
    worth keeping across runs. Everything else is looked up every time.
    """

    def __init__(self, repo_path: str, cache_dir: Optional[Path] = None):
        """Initialize cache service for a repository.

        Args:
            repo_path: Path to the git repository
            cache_dir: Directory holding cache files (default ~/.git-branchdates/cache)
        """
        self.repo_path = Path(repo_path).resolve()
        self.cache_dir = cache_dir or Path.home() / ".git-branchdates" / "cache"
        self.cache_file = self.cache_dir / f"{self._get_repo_hash()}.json"

    def _get_repo_hash(self) -> str:
        """Generate a unique hash for the repository path."""
        return hashlib.md5(str(self.repo_path).encode()).hexdigest()

    def load_cache(self) -> Dict[str, str]:
        """Load cached merged PRs, skipping malformed entries.

        Returns:
            Dictionary mapping branch names to pull request URLs
        """
        if not self.cache_file.exists():
            logger.debug("No cache file found")
            return {}

        try:
            with open(self.cache_file, 'r') as f:
                cache_data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in cache file: {e}")
            return {}
        except OSError as e:
            logger.warning(f"Failed to load cache: {e}")
            return {}

        entries = cache_data.get("pr_merged") if isinstance(cache_data, dict) else None
        if not isinstance(entries, dict):
            logger.warning("Cache missing 'pr_merged' mapping, ignoring cache")
            return {}

        merged = {}
        for branch_name, url in entries.items():
            if not isinstance(branch_name, str) or not isinstance(url, str):
                logger.warning(f"Skipping malformed cache entry for {branch_name!r}")
                continue
            merged[branch_name] = url

        logger.debug(f"Loaded cache with {len(merged)} merged pull requests")
        return merged

    def save_cache(self, merged: Dict[str, str]) -> None:
        """Replace the cache with the current merged PRs; an empty set clears it.

        Args:
            merged: Branch name -> pull request URL
        """
        if not merged:
            self.clear_cache()
            return

        cache_data = {
            "repo_path": str(self.repo_path),
            "last_updated": datetime.now().isoformat(),
            "pr_merged": merged,
        }

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        # Atomic write: write to temp file, then rename
        temp_file = self.cache_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w') as f:
                json.dump(cache_data, f, indent=2)
                f.flush()
            temp_file.replace(self.cache_file)
            logger.debug(f"Saved cache with {len(merged)} merged pull requests")
        except OSError as e:
            logger.warning(f"Failed to save cache: {e}")
        finally:
            if temp_file.exists():
                try:
                    temp_file.unlink()
                except OSError:
                    pass

    def clear_cache(self) -> None:
        """Remove the cache file for this repository."""
        try:
            self.cache_file.unlink()
            logger.debug("Cleared merged pull request cache")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to clear cache: {e}")
