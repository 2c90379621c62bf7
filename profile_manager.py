"""Analysis profile manager: which LLM, voice and prompt the AI features use."""

import yaml
from pathlib import Path
from typing import Any

import config


class ProfileManager:
    """Manages analysis profile loading and switching."""

    def __init__(self, profiles_file: Path | None = None, override_file: Path | None = None):
        """Load profiles from YAML file.

        Args:
            profiles_file: Path to profiles YAML. Defaults to config.PROFILES_FILE.
            override_file: File holding the selected profile id.
                Defaults to config.PROFILE_OVERRIDE_FILE.
        """
        self.profiles_file = profiles_file or config.PROFILES_FILE
        self.override_file = override_file or config.PROFILE_OVERRIDE_FILE
        self._load_profiles()

    def _load_profiles(self) -> None:
        """Load profiles from YAML file.

        Raises:
            ValueError: If the file is missing or holds no valid default profile.
        """
        try:
            with open(self.profiles_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ValueError(
                f"Profiles file not found: {self.profiles_file} (set MOOD_DIARY_PROFILES)"
            ) from None

        self.profiles: dict[str, dict[str, Any]] = data.get("profiles", {})
        self.default_profile = data.get("default_profile", "gentle")
        if self.default_profile not in self.profiles:
            raise ValueError(f"Default profile not defined: {self.default_profile}")

    @property
    def current_profile_id(self) -> str:
        """Selected profile id: the override if set and valid, else the default."""
        if self.override_file.exists():
            profile_id = self.override_file.read_text().strip()
            if profile_id in self.profiles:
                return profile_id
        return self.default_profile

    def get_current(self) -> dict[str, Any]:
        """Get the active profile configuration.

        Returns:
            Profile dict with name, llm, voice, system_prompt.
        """
        return self.profiles[self.current_profile_id]

    def switch(self, profile_id: str) -> dict[str, Any]:
        """Select a profile and remember the choice.

        Raises:
            ValueError: If profile_id is not found.
        """
        if profile_id not in self.profiles:
            raise ValueError(f"Unknown profile: {profile_id}")

        self.override_file.parent.mkdir(parents=True, exist_ok=True)
        self.override_file.write_text(profile_id)
        return self.profiles[profile_id]

    def clear_override(self) -> None:
        """Return to the default profile."""
        if self.override_file.exists():
            self.override_file.unlink()

    def list_profiles(self) -> list[str]:
        return list(self.profiles.keys())

    def list_profiles_formatted(self) -> str:
        """List profiles in a formatted string for display."""
        current = self.current_profile_id
        lines = []
        for profile_id, profile in self.profiles.items():
            marker = " *" if profile_id == current else ""
            llm = profile.get("llm", {})
            lines.append(f"  {profile_id}{marker}")
            lines.append(f"    {profile.get('name', profile_id)} [{llm.get('provider', '?')}: {llm.get('model', '?')}]")

        lines.append("\n* = current profile")
        return "\n".join(lines)
