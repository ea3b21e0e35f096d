"""Runtime configuration read from environment variables."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

BACKENDS = ('dynamodb', 'memory')


@dataclass
class Settings:
    """Configuration for the Lambda entry point and its store."""
    table_name: str = 'events'
    store_backend: str = 'dynamodb'
    log_level: str = 'INFO'
    max_page_size: int = 100
    aws_region: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """
        Load settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance

        Raises:
            ValueError: If STORE_BACKEND or MAX_PAGE_SIZE is invalid
        """
        env = os.environ if environ is None else environ

        store_backend = env.get('STORE_BACKEND', 'dynamodb').strip().lower()
        if store_backend not in BACKENDS:
            raise ValueError(
                f"STORE_BACKEND must be one of {', '.join(BACKENDS)}, "
                f"got {store_backend!r}"
            )

        max_page_size = int(env.get('MAX_PAGE_SIZE', '100'))
        if max_page_size < 1:
            raise ValueError(
                f"MAX_PAGE_SIZE must be positive, got {max_page_size}"
            )

        return cls(
            table_name=env.get('TABLE_NAME', 'events'),
            store_backend=store_backend,
            log_level=env.get('LOG_LEVEL', 'INFO'),
            max_page_size=max_page_size,
            aws_region=env.get('AWS_REGION') or None,
        )
