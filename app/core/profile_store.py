from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import ProfileLoadError, ProfileNotFoundError
from app.schemas.resume import Profile

logger = logging.getLogger(__name__)

_UNSAFE_ID_RE = re.compile(r"[/\\\x00]")


class ProfileStore:
    """Profiles stored as ``<root>/<profile_id>.json``."""

    def __init__(self, root: str | Path):
        self._root = Path(root)

    def _path_for(self, profile_id: str) -> Path | None:
        if not profile_id.strip() or _UNSAFE_ID_RE.search(profile_id) or ".." in profile_id:
            return None
        return self._root / f"{profile_id}.json"

    def load(self, profile_id: str) -> Profile:
        path = self._path_for(profile_id or "")
        if path is None or not path.is_file():
            raise ProfileNotFoundError(profile_id)

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("profile_load_failed profile=%s: %s", profile_id, exc)
            raise ProfileLoadError(f'Profile "{profile_id}" could not be read: {exc}') from exc

        try:
            profile = Profile.model_validate(raw)
        except ValidationError as exc:
            raise ProfileLoadError(f'Profile "{profile_id}" has an invalid shape: {exc}') from exc

        logger.info("profile_loaded profile=%s experience_entries=%s", profile_id, len(profile.experience))
        return profile


def default_profile_store() -> ProfileStore:
    return ProfileStore(settings.resumes_dir)
