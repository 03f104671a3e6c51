"""
Factory for creating alias generation strategies.
Uses caching to avoid creating multiple instances.
"""

from enum import Enum
from alias_app.services.alias_strategies import (
    AliasStrategy,
    RandomAliasStrategy,
    DeterministicAliasStrategy
)
from alias_app.config import settings


class AliasStrategyType(Enum):
    """Available alias generation strategies"""
    DETERMINISTIC = "deterministic"
    RANDOM = "random"


class AliasStrategyFactory:
    """Factory for creating alias generation strategies with caching"""

    _instances = {}  # Cache for strategy instances

    @classmethod
    def create_strategy(
        cls,
        strategy_type: AliasStrategyType = None
    ) -> AliasStrategy:
        """
        Create or return cached alias generation strategy.

        Args:
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.

        Raises:
            ValueError: If strategy_type is unknown
        """
        if strategy_type is None:
            strategy_type = AliasStrategyType(settings.alias_strategy)

        if strategy_type in cls._instances:
            return cls._instances[strategy_type]

        if strategy_type == AliasStrategyType.DETERMINISTIC:
            instance = DeterministicAliasStrategy(
                length=settings.alias_length,
                max_random_attempts=settings.max_random_attempts
            )
        elif strategy_type == AliasStrategyType.RANDOM:
            instance = RandomAliasStrategy(
                length=settings.alias_length,
                max_retries=settings.max_random_attempts
            )
        else:
            raise ValueError(f"Unknown strategy type: {strategy_type}")

        cls._instances[strategy_type] = instance
        return instance

    @classmethod
    def clear_instances(cls):
        """Forget cached strategies (for testing)"""
        cls._instances.clear()
