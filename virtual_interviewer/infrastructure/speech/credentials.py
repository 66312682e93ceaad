"""
Google Cloud credential loading shared by the speech clients.
"""
from typing import Optional

from google.oauth2 import service_account

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def load_credentials(credentials_json: Optional[str]) -> Optional[service_account.Credentials]:
    """Service account credentials from a JSON file, or None for application default credentials."""
    if not credentials_json:
        return None
    return service_account.Credentials.from_service_account_file(
        credentials_json,
        scopes=[CLOUD_PLATFORM_SCOPE],
    )
