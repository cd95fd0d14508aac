"""Load the per-state slot table."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError

from .config import DEFAULT_STATES_PATH, read_yaml
from .exceptions import ConfigError, UnknownStateError
from .labels import alias_pattern
from .models import Game, Slot, SlotConfig, StateConfig

logger = structlog.get_logger(__name__)


def build_urls(base_url: str, slug: str, paths: List[str]) -> List[str]:
    """Expand candidate paths into full URLs, keeping their order."""
    base = base_url.rstrip("/") + "/"
    urls = []
    for path in paths:
        path = str(path).strip("/")
        if path.startswith(("http://", "https://")):
            urls.append(path + "/")
        else:
            urls.append(f"{base}{slug.strip('/')}/{path}/")
    return urls


def check_exclusive_aliases(state: StateConfig) -> None:
    """
    Reject slot tables whose aliases overlap across slots.

    An alias overlaps another slot if it matches, as a whole word, inside one
    of that slot's aliases (or the other way round).

    Raises:
        ConfigError: If two slots of the state share vocabulary
    """
    slots = list(state.slots.items())
    for i, (slot, config) in enumerate(slots):
        for other, other_config in slots[i + 1:]:
            for alias in config.aliases:
                for other_alias in other_config.aliases:
                    if alias_pattern([alias]).search(other_alias) or alias_pattern(
                        [other_alias]
                    ).search(alias):
                        raise ConfigError(
                            f"State {state.code}: alias {alias!r} ({slot.value}) overlaps "
                            f"{other_alias!r} ({other.value})"
                        )


class StateLoader:
    """Load state slot configuration from YAML."""

    def __init__(self, states_path: Optional[str] = None):
        """
        Initialize state loader.

        Args:
            states_path: Path to the states YAML file (default: bundled states.yaml)
        """
        self.states_path = Path(states_path) if states_path else DEFAULT_STATES_PATH
        logger.debug("state_loader_initialized", states_path=str(self.states_path))

    def load_all(self) -> Dict[str, StateConfig]:
        """
        Load every configured state.

        Returns:
            Mapping of lowercase state code to StateConfig

        Raises:
            ConfigError: If the file is missing, malformed or inconsistent
        """
        data = read_yaml(self.states_path)
        base_url = data.get("base_url", "")
        states: Dict[str, StateConfig] = {}

        for code, state_data in (data.get("states") or {}).items():
            state = self._parse_state(str(code).lower(), state_data or {}, base_url)
            check_exclusive_aliases(state)
            states[state.code] = state

        logger.info("states_loaded", count=len(states), states=sorted(states))
        return states

    def load_state(self, code: str) -> StateConfig:
        """
        Load a single state.

        Raises:
            UnknownStateError: If the state is not configured
        """
        normalized = str(code or "").strip().lower()
        states = self.load_all()
        if normalized not in states:
            logger.warning("state_not_found", state=code)
            raise UnknownStateError(normalized)
        return states[normalized]

    def _parse_state(self, code: str, data: Dict[str, Any], base_url: str) -> StateConfig:
        state_base = data.get("base_url", base_url)
        slug = data.get("slug", code)

        try:
            slots = {}
            for slot_name, slot_data in (data.get("slots") or {}).items():
                slot_data = slot_data or {}
                urls = {}
                for game in Game:
                    paths = slot_data.get(game.value) or []
                    if paths:
                        urls[game] = build_urls(state_base, slug, paths)
                slots[Slot(slot_name)] = SlotConfig(
                    aliases=slot_data.get("aliases") or [], urls=urls
                )

            return StateConfig(code=code, name=data.get("name", code.upper()), slots=slots)

        except (ValidationError, ValueError) as e:
            raise ConfigError(f"Invalid configuration for state {code}: {e}") from e
