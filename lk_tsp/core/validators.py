"""
Validation layer for LK-TSP.
Provides validators for configuration values.
"""

from typing import Dict

from lk_tsp.config import CANDIDATE_CONFIG
from lk_tsp.core.exceptions import InvalidConfigurationError


class ConfigValidator:
    """Validate configuration parameters."""

    @staticmethod
    def validate_lk_config(config: Dict) -> bool:
        """
        Validate Lin-Kernighan configuration.

        Args:
            config: LK configuration dictionary

        Returns:
            True if valid, raises InvalidConfigurationError otherwise

        Raises:
            InvalidConfigurationError: If configuration is invalid
        """
        required_keys = [
            'backtracking_depth',
            'infeasibility_depth',
            'candidate_strategy',
            'candidate_k',
        ]

        for key in required_keys:
            if key not in config:
                raise InvalidConfigurationError(
                    parameter=key,
                    value=None,
                    expected="Required parameter"
                )

        for key in ('backtracking_depth', 'infeasibility_depth'):
            value = config[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidConfigurationError(
                    parameter=key,
                    value=value,
                    expected="integer >= 0"
                )

        if config['candidate_strategy'] not in CANDIDATE_CONFIG['strategies']:
            raise InvalidConfigurationError(
                parameter='candidate_strategy',
                value=config['candidate_strategy'],
                expected=" | ".join(CANDIDATE_CONFIG['strategies'])
            )

        if not isinstance(config['candidate_k'], int) or config['candidate_k'] < 1:
            raise InvalidConfigurationError(
                parameter='candidate_k',
                value=config['candidate_k'],
                expected="integer >= 1"
            )

        time_limit = config.get('time_limit')
        if time_limit is not None and time_limit <= 0:
            raise InvalidConfigurationError(
                parameter='time_limit',
                value=time_limit,
                expected="> 0 seconds or None"
            )

        max_exchanges = config.get('max_exchanges')
        if max_exchanges is not None and (not isinstance(max_exchanges, int) or max_exchanges < 0):
            raise InvalidConfigurationError(
                parameter='max_exchanges',
                value=max_exchanges,
                expected="integer >= 0 or None"
            )

        return True
