"""Tunable heuristics for locating and applying hunks."""

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Tuple

import yaml

from fuzzy_diff.diff_exceptions import DiffSettingsError


@dataclass
class DiffApplierSettings:
    """
    Settings for the fuzzy diff applier.

    Attributes:
        removal_match_ratio: Fraction of a hunk's removal lines that must exist somewhere
            in the file before a context match is accepted
        removal_probe_offsets: Offsets from the anchor probed for hunks with no context lines
        removal_probe_window: Lines either side of each probe searched for removal lines
        context_search_forward: Lines searched forward for a context line during replay
        context_search_backward: Lines searched backward for a context line during replay
        removal_search_forward: Lines searched forward for a removal line during replay
        removal_search_backward: Lines searched backward for a removal line during replay
    """
    removal_match_ratio: float = 0.7
    removal_probe_offsets: Tuple[int, ...] = field(default_factory=lambda: (0, -5, -10, 5, 10))
    removal_probe_window: int = 10
    context_search_forward: int = 10
    context_search_backward: int = 3
    removal_search_forward: int = 5
    removal_search_backward: int = 2

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DiffApplierSettings':
        """
        Create settings from a dictionary, using defaults for missing keys.

        Args:
            data: Mapping of setting names to values

        Returns:
            New settings instance

        Raises:
            DiffSettingsError: If unknown keys are present or the values are invalid
        """
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise DiffSettingsError(
                f"Unknown setting(s): {', '.join(unknown)}",
                {'unknown_keys': unknown}
            )

        values = dict(data)
        if 'removal_probe_offsets' in values:
            offsets = values['removal_probe_offsets']
            if not isinstance(offsets, (list, tuple)):
                raise DiffSettingsError(f"removal_probe_offsets must be a list, got {offsets!r}")

            values['removal_probe_offsets'] = tuple(offsets)

        settings = cls(**values)
        errors = settings.validate()
        if errors:
            raise DiffSettingsError("Invalid diff applier settings", {'errors': errors})

        return settings

    @classmethod
    def load_from_file(cls, config_path: str) -> 'DiffApplierSettings':
        """Load settings from a YAML file."""
        if not os.path.exists(config_path):
            raise DiffSettingsError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)

        except (OSError, yaml.YAMLError) as e:
            raise DiffSettingsError(f"Failed to read configuration file: {e}") from e

        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise DiffSettingsError(f"Configuration file must contain a mapping: {config_path}")

        return cls.from_dict(data)

    def save_to_file(self, config_path: str) -> None:
        """Save settings to a YAML file."""
        data = asdict(self)
        data['removal_probe_offsets'] = list(self.removal_probe_offsets)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=True)

    def validate(self) -> List[str]:
        """Validate the settings and return any errors."""
        errors = []

        ratio = self.removal_match_ratio
        if isinstance(ratio, bool) or not isinstance(ratio, (int, float)) or not 0.0 <= ratio <= 1.0:
            errors.append(f"removal_match_ratio must be between 0 and 1, got {self.removal_match_ratio}")

        if not self.removal_probe_offsets:
            errors.append("removal_probe_offsets must not be empty")

        for offset in self.removal_probe_offsets:
            if isinstance(offset, bool) or not isinstance(offset, int):
                errors.append(f"removal_probe_offsets must contain integers, got {offset!r}")

        for name in (
            'removal_probe_window',
            'context_search_forward',
            'context_search_backward',
            'removal_search_forward',
            'removal_search_backward',
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                errors.append(f"{name} must be a non-negative integer, got {value!r}")

        return errors
