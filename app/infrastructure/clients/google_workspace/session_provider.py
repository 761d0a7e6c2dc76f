"""Google API session provider for authentication and service creation."""

import threading
from typing import List, Optional

import structlog
from google.oauth2 import service_account
from googleapiclient.discovery import Resource, build

logger = structlog.get_logger()


class SessionProvider:
    """Manages Google API authentication and service creation.

    Loads service account credentials from a key file once and builds
    authenticated service resources on demand.

    Args:
        credentials_file: Path to the service account JSON key file
        default_scopes: Default OAuth scopes for services

    Thread Safety:
        This class is thread-safe. Resource objects returned by
        get_service() are NOT thread-safe per Google API client library
        documentation, so each worker thread builds its own.

    References:
        https://googleapis.github.io/google-api-python-client/docs/thread_safety.html
    """

    def __init__(
        self,
        credentials_file: str,
        default_scopes: Optional[List[str]] = None,
    ) -> None:
        self._credentials_file: str = credentials_file
        self._default_scopes: List[str] = default_scopes or []
        self._credentials: Optional[service_account.Credentials] = None
        self._lock = threading.Lock()
        self._logger = logger.bind(component="google_session_provider")

    def _load_credentials(self) -> service_account.Credentials:
        with self._lock:
            if self._credentials is None:
                try:
                    self._credentials = (
                        service_account.Credentials.from_service_account_file(
                            self._credentials_file
                        )
                    )
                except (OSError, ValueError) as e:
                    self._logger.error(
                        "invalid_credentials_file",
                        credentials_file=self._credentials_file,
                        error=str(e),
                    )
                    raise ValueError(
                        f"Unable to load credentials from {self._credentials_file}"
                    ) from e
            return self._credentials

    def get_service(
        self,
        service_name: str,
        version: str,
        scopes: Optional[List[str]] = None,
    ) -> Resource:
        """Create an authenticated Google API service resource.

        Args:
            service_name: Google service name (e.g., "sheets")
            version: API version (e.g., "v4")
            scopes: OAuth scopes (uses default if None)

        Returns:
            Authenticated Google API service resource

        Raises:
            ValueError: If the credentials file is missing or invalid
        """
        creds = self._load_credentials()

        service_scopes = scopes or self._default_scopes
        if service_scopes:
            creds = creds.with_scopes(service_scopes)

        try:
            return build(
                service_name,
                version,
                credentials=creds,
                cache_discovery=False,
            )
        except Exception as e:
            self._logger.error("service_creation_failed", error=str(e))
            raise
