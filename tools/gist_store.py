"""
Gist Store — reads and writes named JSON files inside a GitHub Gist.
Remote copy of the dataset and checkpoint; callers treat its failures as non-fatal.
"""

from typing import Optional

import httpx

from tools.errors import MissingCredentials, RemoteStoreError


class GistStore:
    """
    Document store backed by one GitHub Gist.

    Reads work without a token for public gists. Writes need both the
    gist id and a token.
    """

    name = "gist"

    def __init__(
        self,
        gist_id: str,
        token: str,
        api_url: str = "https://api.github.com/gists",
        timeout: int = 30,
        transport: httpx.BaseTransport = None,
    ):
        self.gist_id = gist_id
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def gist_url(self) -> str:
        return f"{self.api_url}/{self.gist_id}"

    def _headers(self) -> dict:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            headers=self._headers(),
            follow_redirects=True,
            transport=self.transport,
        )

    def read(self, key: str) -> Optional[str]:
        """
        Return the content of file `key` in the gist.

        Returns None when no gist is configured or the file is not in the gist.

        Raises:
            RemoteStoreError: On HTTP or transport failures.
        """
        if not self.gist_id:
            return None

        try:
            with self._client() as client:
                resp = client.get(self.gist_url)
                if resp.status_code != 200:
                    raise RemoteStoreError(
                        f"GitHub API returned HTTP {resp.status_code} reading gist",
                        status_code=resp.status_code,
                    )

                body = resp.json()
                files = body.get("files") if isinstance(body, dict) else None
                if not isinstance(files, dict):
                    raise RemoteStoreError("Unexpected gist payload: no files object")

                file = files.get(key)
                if file is None:
                    return None
                if not isinstance(file, dict):
                    raise RemoteStoreError(f"Unexpected gist entry for {key}")

                # Files over ~1MB come back truncated; the raw URL has the full body
                if file.get("truncated") and file.get("raw_url"):
                    raw = client.get(file["raw_url"])
                    if raw.status_code != 200:
                        raise RemoteStoreError(
                            f"GitHub returned HTTP {raw.status_code} for raw file {key}",
                            status_code=raw.status_code,
                        )
                    return raw.text

                content = file.get("content")
                if content is not None and not isinstance(content, str):
                    raise RemoteStoreError(f"Unexpected content type for {key}")
                return content

        except httpx.HTTPError as e:
            raise RemoteStoreError(f"HTTP error reading gist: {e}") from e
        except ValueError as e:
            raise RemoteStoreError(f"Invalid JSON from GitHub API: {e}") from e

    def write(self, key: str, content: str) -> None:
        """
        Replace file `key` in the gist.

        Raises:
            MissingCredentials: If the gist id or token is not configured.
            RemoteStoreError: On HTTP or transport failures.
        """
        if not self.gist_id or not self.token:
            raise MissingCredentials("GIST_ID and GITHUB_TOKEN must be set")

        try:
            with self._client() as client:
                resp = client.patch(
                    self.gist_url,
                    json={"files": {key: {"content": content}}},
                )
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"HTTP error writing gist: {e}") from e

        if resp.status_code != 200:
            raise RemoteStoreError(
                f"Failed to write to Gist: {resp.status_code} - {resp.text[:200]}",
                status_code=resp.status_code,
            )

        print(f"[Gist] ☁️  Saved {key} to gist {self.gist_id}")
