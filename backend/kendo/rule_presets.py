"""
Rule Presets — championship settings per federation (single source of truth)

A preset maps category id -> ChampionshipSettings attributes. Presets are
selected by rule id (Tournament.rule_id):

- 0: no preset
- 1: IKF  (International Kendo Federation)
- 2: EKF  (European Kendo Federation)
- 3: LAKF (Latin American Kendo Federation)

The preset tables are served through a RulePresetProvider so callers (and
tests) can swap the source.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from kendo import settings

logger = logging.getLogger(__name__)

Preset = Dict[int, Dict[str, Any]]

# =============================================================================
# Rule ids
# =============================================================================

RULE_NONE = 0
RULE_IKF = 1
RULE_EKF = 2
RULE_LAKF = 3

RULE_PRESET_NAMES: Dict[int, str] = {
    RULE_IKF: "ikf_settings",
    RULE_EKF: "ekf_settings",
    RULE_LAKF: "lakf_settings",
}

# =============================================================================
# Built-in presets (category ids match DEFAULT_CATEGORIES in kendo.database)
# =============================================================================

_INDIVIDUAL = {
    "fighting_areas": 4,
    "fight_duration": "05:00",
    "has_preliminary": True,
    "preliminary_group_size": 3,
    "preliminary_winner": 1,
    "preliminary_duration": "03:00",
    "tree_type": 1,
    "has_encho": True,
    "encho_qty": 0,
    "encho_duration": "00:00",
    "has_hantei": False,
}

_TEAM = {
    "fighting_areas": 2,
    "fight_duration": "05:00",
    "has_preliminary": True,
    "preliminary_group_size": 3,
    "preliminary_winner": 1,
    "preliminary_duration": "05:00",
    "tree_type": 1,
    "has_encho": True,
    "encho_qty": 1,
    "encho_duration": "00:00",
    "has_hantei": False,
    "team_size": 5,
    "team_reserve": 2,
}

IKF_SETTINGS: Preset = {
    1: dict(_INDIVIDUAL),
    2: dict(_INDIVIDUAL),
    3: dict(_TEAM),
    4: dict(_TEAM, team_size=3, team_reserve=1),
}

EKF_SETTINGS: Preset = {
    1: dict(_INDIVIDUAL),
    2: dict(_INDIVIDUAL),
    3: dict(_TEAM),
    4: dict(_TEAM),
    5: dict(_INDIVIDUAL, fight_duration="03:00", has_encho=False, has_hantei=True),
    6: dict(_INDIVIDUAL, fight_duration="03:00", has_encho=False, has_hantei=True),
    7: dict(_TEAM, fight_duration="03:00", team_size=3, team_reserve=1, has_hantei=True),
}

LAKF_SETTINGS: Preset = {
    1: dict(_INDIVIDUAL, fighting_areas=2),
    2: dict(_INDIVIDUAL, fighting_areas=2),
    3: dict(_TEAM, fighting_areas=1),
}

BUILTIN_PRESETS: Dict[str, Preset] = {
    "ikf_settings": IKF_SETTINGS,
    "ekf_settings": EKF_SETTINGS,
    "lakf_settings": LAKF_SETTINGS,
}


class MissingPresetEntryError(KeyError):
    """A championship's category has no entry in the applied preset"""

    def __init__(self, championship_id: Optional[int], category_id: int):
        super().__init__(category_id)
        self.championship_id = championship_id
        self.category_id = category_id

    def __str__(self) -> str:
        return f"No preset entry for category {self.category_id} (championship {self.championship_id})"


# =============================================================================
# Providers
# =============================================================================


class RulePresetProvider(Protocol):
    def get(self, name: str) -> Optional[Preset]:
        """Return the named preset, or None when it is not configured"""
        ...


def normalize_preset(raw: Dict[Any, Dict[str, Any]]) -> Preset:
    """Coerce category keys to int (JSON object keys are strings)"""
    return {int(category_id): dict(values) for category_id, values in raw.items()}


class StaticRulePresetProvider:
    """Serves presets from an in-memory mapping (the built-in tables by default)"""

    def __init__(self, presets: Optional[Dict[str, Dict[Any, Dict[str, Any]]]] = None):
        source = BUILTIN_PRESETS if presets is None else presets
        self._presets = {name: normalize_preset(preset) for name, preset in source.items()}

    def get(self, name: str) -> Optional[Preset]:
        preset = self._presets.get(name)
        if preset is None:
            return None
        return {category_id: dict(values) for category_id, values in preset.items()}


class JsonRulePresetProvider(StaticRulePresetProvider):
    """
    Reads presets from a JSON file shaped like
    {"ikf_settings": {"1": {"fight_duration": "05:00", ...}, ...}, ...}
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        with self.path.open(encoding="utf-8") as fh:
            raw = json.load(fh)
        super().__init__(raw)
        logger.info("Loaded %d rule presets from %s", len(raw), self.path)


def default_provider() -> RulePresetProvider:
    if settings.RULE_PRESETS_PATH:
        return JsonRulePresetProvider(settings.RULE_PRESETS_PATH)
    return StaticRulePresetProvider()


def load_rules_options(rule_id: int, provider: RulePresetProvider) -> Optional[Preset]:
    """
    Resolve a rule id to its preset.

    Returns None for RULE_NONE, for unknown rule ids, and for a known rule
    whose preset the provider does not carry. Callers treat None as "nothing
    to configure".
    """
    name = RULE_PRESET_NAMES.get(rule_id)
    if name is None:
        return None
    options = provider.get(name)
    if options is None:
        logger.warning("Rule %s selected but preset %s is not configured", rule_id, name)
    return options


def settings_for_championship(options: Preset, championship_id: Optional[int], category_id: int) -> Dict[str, Any]:
    """Copy of the preset entry for a category, bound to the championship"""
    if category_id not in options:
        raise MissingPresetEntryError(championship_id, category_id)
    rules = dict(options[category_id])
    rules["championship_id"] = championship_id
    return rules
