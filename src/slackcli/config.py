from __future__ import annotations

import json
import logging
import os
import stat
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

SLACKCLI_DIR = os.path.expanduser(os.getenv("SLACKCLI_HOME", "~/.slackcli"))
CONFIG_PATH = os.path.join(SLACKCLI_DIR, "config.json")
PROFILE_ENV_VAR = "SLACKCLI_PROFILE"
DEFAULT_PROFILE = "user"


@dataclass(frozen=True)
class Profile:
    """Keyring location of one Slack token."""

    name: str
    service: str
    account: str = "token"
    token_hint: str = "xoxp-…"


BUILTIN_PROFILES: dict[str, Profile] = {
    "user": Profile(name="user", service="slackcli_user", account="token", token_hint="xoxp-…"),
    "bot": Profile(name="bot", service="slackcli_bot", account="token", token_hint="xoxb-…"),
}


def _secure_path(path: Path) -> None:
    if not path.exists():
        return

    try:
        if os.name == "nt":
            os.chmod(path, stat.S_IREAD | stat.S_IWRITE)
        else:
            mode = stat.S_IMODE(path.stat().st_mode)
            if mode & (stat.S_IRWXG | stat.S_IRWXO):
                logger.warning("Adjusted permissions for %s to 0o600", path)
            path.chmod(0o600)
    except PermissionError as exc:
        logger.warning("Unable to enforce secure permissions for %s: %s", path, exc)


@dataclass
class ConfigData:
    default_profile: str | None = None
    profiles: dict[str, Profile] = field(default_factory=dict)
    api_base: str | None = None

    def all_profiles(self) -> dict[str, Profile]:
        """Built-in profiles overlaid with the configured ones."""

        merged = dict(BUILTIN_PROFILES)
        merged.update(self.profiles)
        return merged


class ConfigStore:
    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = Path(path) if path else Path(CONFIG_PATH)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"default": None, "profiles": {}}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Unable to read config file {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {self.path} must contain a JSON object")
        return raw

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
        tmp.replace(self.path)
        _secure_path(self.path)

    def load(self) -> ConfigData:
        raw = self._read()
        profiles: dict[str, Profile] = {}
        for name, data in (raw.get("profiles") or {}).items():
            if not isinstance(data, dict) or not data.get("service"):
                logger.warning("Ignoring malformed profile %r in %s", name, self.path)
                continue
            profiles[name] = Profile(
                name=name,
                service=str(data["service"]),
                account=str(data.get("account") or "token"),
                token_hint=str(data.get("token_hint") or "xoxp-…"),
            )
        return ConfigData(
            default_profile=raw.get("default"),
            profiles=profiles,
            api_base=raw.get("api_base"),
        )

    def save(self, cfg: ConfigData) -> None:
        data: dict[str, Any] = {
            "default": cfg.default_profile,
            "profiles": {
                name: {k: v for k, v in asdict(profile).items() if k != "name"}
                for name, profile in cfg.profiles.items()
            },
        }
        if cfg.api_base:
            data["api_base"] = cfg.api_base
        self._write(data)

    def add_or_update_profile(self, profile: Profile, *, set_default: bool = False) -> ConfigData:
        """Persist ``profile`` and optionally make it the default."""

        cfg = self.load()
        cfg.profiles[profile.name] = profile
        if set_default:
            cfg.default_profile = profile.name
        self.save(cfg)
        return cfg

    def set_default_profile(self, name: str) -> ConfigData:
        """Mark the profile ``name`` (configured or built-in) as the default."""

        cfg = self.load()
        if name not in cfg.all_profiles():
            raise ConfigError(f"Profile '{name}' not found")
        cfg.default_profile = name
        self.save(cfg)
        return cfg

    def resolve_profile(
        self, name: str | None = None, *, config: ConfigData | None = None
    ) -> Profile:
        """Return the active profile.

        Resolution order is the explicit ``name``, then ``SLACKCLI_PROFILE``,
        then the configured default, then the built-in ``user`` profile.
        """

        cfg = config or self.load()
        selected = name or os.getenv(PROFILE_ENV_VAR) or cfg.default_profile or DEFAULT_PROFILE
        profile = cfg.all_profiles().get(selected)
        if profile is None:
            raise ConfigError(
                f"Profile '{selected}' not found. Run `slack profile list` to see profiles."
            )
        return profile
