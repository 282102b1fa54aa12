"""Authentication helpers for the Gmail API."""

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import Resource, build

from inbox_triage import constants


def get_gmail_service() -> Resource:
    """Return an authenticated Gmail API service object.

    A cached token is refreshed when expired.  Without one, the OAuth
    browser flow runs against the client secrets in ``credentials.json``.
    """
    constants.CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    creds: Credentials | None = None

    if constants.TOKEN_PATH.exists():
        creds = Credentials.from_authorized_user_file(str(constants.TOKEN_PATH), constants.SCOPES)

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
    elif not creds or not creds.valid:
        if not constants.CREDENTIALS_PATH.exists():
            raise FileNotFoundError(
                f"Credentials file not found at {constants.CREDENTIALS_PATH}.\n"
                "Download your OAuth client credentials from the Google Cloud Console "
                "and save them as:\n"
                f"  {constants.CREDENTIALS_PATH}"
            )
        flow = InstalledAppFlow.from_client_secrets_file(str(constants.CREDENTIALS_PATH), constants.SCOPES)
        creds = flow.run_local_server(port=0)

    constants.TOKEN_PATH.write_text(creds.to_json())

    return build("gmail", "v1", credentials=creds)


def authenticated_address() -> str:
    """Return the address of the authenticated mailbox."""
    service = get_gmail_service()
    profile = service.users().getProfile(userId="me").execute()
    return profile["emailAddress"]
