"""Lexicon loader for the relevance scorer."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from jsonschema import ValidationError, validate
from loguru import logger

from .settings import config


_TERM_MAP = {
    "type": "object",
    "additionalProperties": {
        "type": "array",
        "items": {"type": "string", "minLength": 1},
    },
}

LEXICON_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["abbreviations", "synonyms", "jargon"],
    "properties": {
        "abbreviations": _TERM_MAP,
        "synonyms": _TERM_MAP,
        "jargon": _TERM_MAP,
        "concept_pairs": {
            "type": "array",
            "items": {
                "type": "array",
                "items": {"type": "string", "minLength": 1},
                "minItems": 2,
                "maxItems": 2,
            },
        },
        "suggestion_seeds": {"type": "array", "items": {"type": "string"}},
        "weights": {
            "type": "object",
            "additionalProperties": {"type": "number"},
        },
    },
}


class LexiconError(Exception):
    """Raised when the lexicon resource cannot be loaded or is malformed."""
    pass


class LexiconLoader:
    """Loads lexicon tables from YAML files."""

    def __init__(self, lexicon_path: Optional[Path] = None):
        """Initialize the lexicon loader.

        Args:
            lexicon_path: Path to the lexicon.yaml file
        """
        if lexicon_path is None:
            lexicon_path = Path(config.LEXICON_PATH)
        self.lexicon_path = Path(lexicon_path)
        self._lexicon_data: Optional[Dict[str, Any]] = None

    def load_lexicon(self) -> Dict[str, Any]:
        """Load and validate the lexicon from its YAML file."""
        if self._lexicon_data is None:
            try:
                with open(self.lexicon_path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise LexiconError(f"Failed to load lexicon from {self.lexicon_path}: {e}")

            try:
                validate(instance=data, schema=LEXICON_SCHEMA)
            except ValidationError as e:
                raise LexiconError(f"Invalid lexicon {self.lexicon_path}: {e.message}")

            self._lexicon_data = data
            logger.info(
                f"Loaded lexicon from {self.lexicon_path}: "
                f"{len(data['abbreviations'])} abbreviations, "
                f"{len(data['synonyms'])} synonyms, {len(data['jargon'])} jargon terms"
            )
        return self._lexicon_data

    def get_table(self, name: str) -> Dict[str, Any]:
        """Get a single term table (abbreviations, synonyms or jargon)."""
        data = self.load_lexicon()
        if name not in ("abbreviations", "synonyms", "jargon"):
            raise ValueError(f"Table '{name}' not found in lexicon")
        return data[name]

    def get_weights(self) -> Dict[str, float]:
        """Get scoring weight overrides, if any."""
        return dict(self.load_lexicon().get("weights") or {})
