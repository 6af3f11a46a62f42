"""GitHub organization audit log source.

Endpoint:
    GET {api_url}/orgs/{org}/audit-log?phrase=...&include=...&order=...&per_page=...&after=...

Pagination is cursor based: the ``Link`` header's ``rel="next"`` URL carries an ``after``
parameter. No next link means the result set is exhausted.
"""

from typing import Optional

import httpx

from auditvault.core.logging import ContextualLogger
from auditvault.platform.export.exceptions import SourceFetchError
from auditvault.platform.sources._base import AuditQuery, BaseAuditSource
from auditvault.schemas.export import AuditPage

GITHUB_API_VERSION = "2022-11-28"


class GitHubAuditLogSource(BaseAuditSource):
    """Reads audit entries for a GitHub organization."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        organization: str,
        token: str,
        api_url: str = "https://api.github.com",
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the source.

        Args:
            client: Shared HTTP client (owned by the caller)
            organization: GitHub organization login
            token: Token with the ``read:audit_log`` scope
            api_url: REST API root, override for GitHub Enterprise Server
            logger: Contextual logger
        """
        super().__init__()
        self._client = client
        self.organization = organization
        self._token = token
        self.api_url = api_url.rstrip("/")
        if logger:
            self.set_logger(logger)

    @property
    def audit_log_url(self) -> str:
        """Audit log endpoint for the organization."""
        return f"{self.api_url}/orgs/{self.organization}/audit-log"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    async def get_page(self, query: AuditQuery, cursor: Optional[str] = None) -> AuditPage:
        """Fetch one page of audit entries."""
        params = {
            "phrase": query.phrase,
            "include": query.include,
            "order": query.order,
            "per_page": query.per_page,
        }
        if cursor:
            params["after"] = cursor

        try:
            response = await self._client.get(
                self.audit_log_url, params=params, headers=self._headers()
            )
            response.raise_for_status()
            records = response.json()
        except httpx.HTTPStatusError as e:
            raise SourceFetchError(
                f"unable to fetch audit entries: {e.response.status_code} "
                f"{e.response.reason_phrase} from {self.audit_log_url}"
            ) from e
        except httpx.HTTPError as e:
            raise SourceFetchError(f"unable to fetch audit entries: {e}") from e
        except ValueError as e:
            raise SourceFetchError(f"audit log response is not valid JSON: {e}") from e

        if not isinstance(records, list):
            raise SourceFetchError(
                f"expected a JSON array of audit entries, got {type(records).__name__}"
            )

        return AuditPage(records=records, next_cursor=_next_cursor(response))


def _next_cursor(response: httpx.Response) -> Optional[str]:
    """Extract the ``after`` cursor from the ``rel="next"`` link, if any."""
    next_link = response.links.get("next", {}).get("url")
    if not next_link:
        return None
    cursor = httpx.URL(next_link).params.get("after")
    if not cursor:
        # Stopping here would silently drop the remaining pages
        raise SourceFetchError(f"next link has no 'after' cursor: {next_link}")
    return cursor
