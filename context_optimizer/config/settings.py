"""Configuration settings for the context optimizer."""

from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
import yaml
import json
from pathlib import Path


DEFAULT_RESERVE_OUTPUT = 4096


@dataclass
class PricingConfig:
    """Explicit input pricing, overriding the built-in table."""
    input_per_1m: float
    provider: str = "custom"


@dataclass
class WarningThresholds:
    """Thresholds used when reporting warnings."""
    source_item_limits: Dict[str, int] = field(default_factory=lambda: {"tools": 10})
    high_drop_ratio: float = 0.5
    low_utilization: float = 0.1
    lost_in_middle_score: float = 80.0
    lost_in_middle_min_items: int = 5


@dataclass
class OptimizerConfig:
    """Main configuration for the context optimizer."""
    model: str
    context_window: int
    reserve_output: int = DEFAULT_RESERVE_OUTPUT
    tokenizer: str = "heuristic"
    recency_min_factor: float = 0.1
    pricing: Optional[PricingConfig] = None
    warnings: WarningThresholds = field(default_factory=WarningThresholds)

    @property
    def budget(self) -> int:
        """Input token budget: context window minus reserved output."""
        return self.context_window - self.reserve_output

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'OptimizerConfig':
        """Create configuration from dictionary."""
        pricing = None
        pricing_data = config_dict.get('pricing')
        if pricing_data:
            pricing = PricingConfig(**pricing_data)

        warnings = WarningThresholds(**(config_dict.get('warnings') or {}))

        return cls(
            model=config_dict.get('model', 'gpt-4o'),
            context_window=config_dict.get('context_window', 128000),
            reserve_output=config_dict.get('reserve_output', DEFAULT_RESERVE_OUTPUT),
            tokenizer=config_dict.get('tokenizer', 'heuristic'),
            recency_min_factor=config_dict.get('recency_min_factor', 0.1),
            pricing=pricing,
            warnings=warnings
        )

    @classmethod
    def from_yaml(cls, file_path: str) -> 'OptimizerConfig':
        """Load configuration from YAML file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.from_dict(config_dict)

    @classmethod
    def from_json(cls, file_path: str) -> 'OptimizerConfig':
        """Load configuration from JSON file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data = {
            'model': self.model,
            'context_window': self.context_window,
            'reserve_output': self.reserve_output,
            'tokenizer': self.tokenizer,
            'recency_min_factor': self.recency_min_factor,
            'warnings': {
                'source_item_limits': dict(self.warnings.source_item_limits),
                'high_drop_ratio': self.warnings.high_drop_ratio,
                'low_utilization': self.warnings.low_utilization,
                'lost_in_middle_score': self.warnings.lost_in_middle_score,
                'lost_in_middle_min_items': self.warnings.lost_in_middle_min_items
            }
        }
        if self.pricing is not None:
            data['pricing'] = {
                'input_per_1m': self.pricing.input_per_1m,
                'provider': self.pricing.provider
            }
        return data

    def save_yaml(self, file_path: str):
        """Save configuration to YAML file."""
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

    def save_json(self, file_path: str):
        """Save configuration to JSON file."""
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of issues.

        Returns:
            List of validation issues (empty if valid)
        """
        issues = []

        if not self.model:
            issues.append("Model identifier must not be empty")

        if self.context_window <= 0:
            issues.append("Context window must be positive")

        if self.reserve_output < 0:
            issues.append("Reserved output must be non-negative")

        if self.budget <= 0:
            issues.append("Reserved output leaves no input budget")

        if self.tokenizer not in ['heuristic', 'simple', 'tiktoken']:
            issues.append(f"Unknown tokenizer backend: '{self.tokenizer}'")

        if not 0 <= self.recency_min_factor <= 1:
            issues.append("Recency min factor must be between 0 and 1")

        if self.pricing is not None and self.pricing.input_per_1m < 0:
            issues.append("Pricing must be non-negative")

        for source, limit in self.warnings.source_item_limits.items():
            if limit < 0:
                issues.append(f"Item limit for source '{source}' must be non-negative")

        if not 0 <= self.warnings.high_drop_ratio <= 1:
            issues.append("High drop ratio must be between 0 and 1")

        if not 0 <= self.warnings.low_utilization <= 1:
            issues.append("Low utilization threshold must be between 0 and 1")

        return issues


def get_default_config() -> OptimizerConfig:
    """Get the default configuration."""
    return OptimizerConfig.from_dict({
        'model': 'gpt-4o',
        'context_window': 128000,
        'reserve_output': DEFAULT_RESERVE_OUTPUT,
        'tokenizer': 'heuristic',
        'recency_min_factor': 0.1,
        'warnings': {
            'source_item_limits': {'tools': 10},
            'high_drop_ratio': 0.5,
            'low_utilization': 0.1,
            'lost_in_middle_score': 80.0,
            'lost_in_middle_min_items': 5
        }
    })
