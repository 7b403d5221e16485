"""
Runtime configuration.

Values come from the environment (and a `.env` file when present):
    ARCHVIZ_DIAGRAM             default diagram type ("full")
    ARCHVIZ_RAW                 emit raw mermaid without fences ("false")
    ARCHVIZ_INDENT              indentation width (4)
    ARCHVIZ_DEFAULT_TECHNOLOGY  C4 container fallback label ("Rust Module")
    ARCHVIZ_LAYER_RULES         extra layer rules, "kw1,kw2=Label;kw3=Label"
    ARCHVIZ_LAYER_RULES_FILE    YAML file with extra layer rules
    ARCHVIZ_LOG_LEVEL           logging level for the CLI ("WARNING")
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import dotenv
import yaml

from archviz.diagrams.layers import (
    DEFAULT_LAYER_RULES,
    DEFAULT_TECHNOLOGY,
    LayerRule,
    load_layer_rules,
    merge_layer_rules,
    parse_layer_rules,
)
from archviz.diagrams.mermaid import DiagramType, MermaidGenerator

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """Settings shared by the CLI and the HTTP API."""
    diagram: DiagramType = DiagramType.FULL
    raw: bool = False
    indent: int = 4
    default_technology: str = DEFAULT_TECHNOLOGY
    layer_rules: List[LayerRule] = field(default_factory=lambda: list(DEFAULT_LAYER_RULES))
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from an environment mapping.

        Raises:
            ValueError: naming the variable holding an invalid value
        """
        env = os.environ if env is None else env
        settings = cls()

        diagram = env.get("ARCHVIZ_DIAGRAM")
        if diagram:
            try:
                settings.diagram = DiagramType(diagram.lower())
            except ValueError:
                choices = ", ".join(d.value for d in DiagramType)
                raise ValueError(
                    f"ARCHVIZ_DIAGRAM: unknown diagram type '{diagram}'. Supported: {choices}"
                )

        raw = env.get("ARCHVIZ_RAW", "").lower()
        if raw not in _TRUE_VALUES + _FALSE_VALUES:
            raise ValueError(f"ARCHVIZ_RAW: expected a boolean, got '{raw}'")
        settings.raw = raw in _TRUE_VALUES

        indent = env.get("ARCHVIZ_INDENT")
        if indent:
            if not indent.isdigit():
                raise ValueError(f"ARCHVIZ_INDENT: expected a non-negative integer, got '{indent}'")
            settings.indent = int(indent)

        technology = env.get("ARCHVIZ_DEFAULT_TECHNOLOGY")
        if technology:
            settings.default_technology = technology

        overrides: List[LayerRule] = []
        rules = env.get("ARCHVIZ_LAYER_RULES")
        if rules:
            try:
                overrides.extend(parse_layer_rules(rules))
            except ValueError as e:
                raise ValueError(f"ARCHVIZ_LAYER_RULES: {e}")

        rules_file = env.get("ARCHVIZ_LAYER_RULES_FILE")
        if rules_file:
            try:
                overrides.extend(load_layer_rules(rules_file))
            except (OSError, ValueError, AttributeError, yaml.YAMLError) as e:
                raise ValueError(f"ARCHVIZ_LAYER_RULES_FILE: {e}")

        if overrides:
            settings.layer_rules = merge_layer_rules(overrides)

        log_level = env.get("ARCHVIZ_LOG_LEVEL")
        if log_level:
            if log_level.upper() not in _LOG_LEVELS:
                raise ValueError(f"ARCHVIZ_LOG_LEVEL: unknown level '{log_level}'")
            settings.log_level = log_level.upper()

        return settings

    def create_generator(self) -> MermaidGenerator:
        return MermaidGenerator(
            indent=self.indent,
            layer_rules=self.layer_rules,
            default_technology=self.default_technology
        )

    def to_dict(self) -> Dict:
        return {
            "diagram": self.diagram.value,
            "raw": self.raw,
            "indent": self.indent,
            "default_technology": self.default_technology,
            "layer_rules": [
                {"keywords": list(rule.keywords), "label": rule.label}
                for rule in self.layer_rules
            ],
            "log_level": self.log_level
        }


def load_settings() -> Settings:
    """Load `.env` from the working directory (without overriding the environment) and read settings."""
    dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
    return Settings.from_env()
