"""
curator.infrastructure.remote_store - Backing Store Client
============================================================

Wraps the HTTP contract of the version-controlled file store that holds the
catalog. The store offers whole-file GET/PUT only; the one concurrency
primitive is the conditional write: a PUT carrying the file's current
content hash (`sha`) succeeds only if nobody committed in between.

    ┌──────────────────────┐   read_authenticated()   ┌──────────────────────┐
    │  PublishOrchestrator │ ───────────────────────▶ │                      │
    │                      │ ◀── RemoteFileHandle ─── │     RemoteStore      │
    │                      │   write(expected_token)  │  (GitHub contents    │
    │                      │ ───────────────────────▶ │   API or in-memory)  │
    └──────────────────────┘ ◀── new token | Conflict └──────────────────────┘
    ┌──────────────────────┐   read_public(locator)             ▲
    │     CatalogCache     │ ───────────────────────────────────┘
    └──────────────────────┘   (no credential, cache-busted)

HTTP Contract (GitHub REST API):
    GET  /repos/{owner}/{repo}                    visibility + access check
    GET  /repos/{owner}/{repo}/contents/{path}    {content (base64), sha}
    PUT  /repos/{owner}/{repo}/contents/{path}    {message, content, branch, sha?}
    GET  https://raw.githubusercontent.com/{owner}/{repo}/{branch}/{path}?t=<ms>

Error Mapping:
    401/403 → AuthError      404 → NotFoundError (None on reads)
    409     → ConflictError  422 mentioning "sha" → ConflictError
    timeout → NetworkError (STORE_TIMEOUT)
    any other httpx error (transport, redirects, decoding) → NetworkError
    anything else non-2xx → StoreError
    2xx with a body that is not the expected JSON → StoreError (MALFORMED_RESPONSE)

No operation retries. The caller owns retry policy.

Implementations:
    - RemoteStore (ABC):     The contract
    - GitHubRemoteStore:     httpx.AsyncClient against the GitHub REST API
    - InMemoryRemoteStore:   Dict-backed fake with real git blob hashes
"""

from __future__ import annotations

import asyncio
import hashlib
import time
from abc import ABC, abstractmethod
from collections import defaultdict, deque
from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx
import structlog

from curator.core.config import StoreConfig, StoreConnection
from curator.core.enums import Visibility
from curator.core.exceptions import (
    AuthError,
    CodecError,
    ConflictError,
    NetworkError,
    NotFoundError,
    StoreError,
)
from curator.core.models import RemoteFileHandle
from curator.infrastructure.manifest_codec import from_transport, to_transport


logger = structlog.get_logger()

StoreFactory = Callable[[StoreConnection], "RemoteStore"]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


# =============================================================================
# Abstract Base Class
# =============================================================================
class RemoteStore(ABC):
    """Contract for a client bound to one StoreConnection.

    Methods:
        locator_for(path): Public locator of a repository path.
        read_public(locator): Anonymous, cache-busted read.
        read_authenticated(path): Content + integrity token.
        write(path, content, message, expected_token): Create or
            conditionally update a file. The only durable side effect.
        check_access(): Lightweight authenticated check.
        get_visibility(): Public / private repository.
    """

    def __init__(self, connection: StoreConnection) -> None:
        self._connection = connection

    @property
    def connection(self) -> StoreConnection:
        """The connection this client is bound to."""
        return self._connection

    @abstractmethod
    def locator_for(self, path: str) -> str:
        """Return the public locator for a repository path."""
        ...

    @abstractmethod
    async def read_public(self, locator: str) -> Optional[bytes]:
        """Read a published file without credentials.

        Every call must observe the latest committed state, so
        implementations defeat intermediate caches.

        Returns:
            The raw bytes, or None if the file does not exist.
        """
        ...

    @abstractmethod
    async def read_authenticated(self, path: str) -> Optional[RemoteFileHandle]:
        """Read a file together with its integrity token.

        Returns:
            The handle, or None if the file does not exist (create new).

        Raises:
            AuthError: Missing or rejected credential.
            NetworkError: Transport failure.
        """
        ...

    @abstractmethod
    async def write(
        self,
        path: str,
        content: str,
        message: str,
        expected_token: Optional[str] = None,
    ) -> str:
        """Create or update a file.

        Args:
            path: Repository path.
            content: Transport-encoded (base64) file content.
            message: Commit message.
            expected_token: Integrity token captured by the preceding read.
                None means "create"; the store refuses if the file exists.

        Returns:
            The file's new integrity token.

        Raises:
            ConflictError: expected_token is stale (or missing for an
                existing file). Nothing was written.
            AuthError: Missing or rejected credential.
            NotFoundError: Repository or branch does not exist.
            NetworkError: Transport failure; the write may or may not
                have landed.
        """
        ...

    @abstractmethod
    async def check_access(self) -> bool:
        """Return True if the credential can reach the repository."""
        ...

    @abstractmethod
    async def get_visibility(self) -> Visibility:
        """Return the repository's visibility."""
        ...

    def _require_credential(self, operation: str) -> str:
        credential = self._connection.credential
        if not credential:
            raise AuthError(
                message="Authentication required",
                error_code="AUTH_REQUIRED",
                details={"operation": operation},
            )
        return credential

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"owner={self._connection.owner!r}, "
            f"collection={self._connection.collection!r}, "
            f"branch={self._connection.branch!r})"
        )


# =============================================================================
# GitHub Implementation
# =============================================================================
class GitHubRemoteStore(RemoteStore):
    """RemoteStore over the GitHub REST contents API.

    The httpx.AsyncClient is shared and owned by the caller (the facade), so
    connection pooling survives across clients bound to different
    connections. Every request carries the configured hard timeout.

    Example:
        >>> async with httpx.AsyncClient() as http:
        ...     store = GitHubRemoteStore(connection, http)
        ...     handle = await store.read_authenticated("gallery.json")
    """

    def __init__(
        self,
        connection: StoreConnection,
        http_client: httpx.AsyncClient,
        config: Optional[StoreConfig] = None,
    ) -> None:
        super().__init__(connection)
        self._http = http_client
        self._config = config or StoreConfig()
        self._logger = logger.bind(
            component="github_remote_store",
            owner=connection.owner,
            collection=connection.collection,
        )

    # -------------------------------------------------------------------------
    # URLs
    # -------------------------------------------------------------------------
    @property
    def _repo_url(self) -> str:
        base = self._config.api_base_url.rstrip("/")
        owner = quote(self._connection.owner, safe="")
        repo = quote(self._connection.collection, safe="")
        return f"{base}/repos/{owner}/{repo}"

    def _contents_url(self, path: str) -> str:
        return f"{self._repo_url}/contents/{quote(path.lstrip('/'), safe='/')}"

    def locator_for(self, path: str) -> str:
        base = self._config.raw_base_url.rstrip("/")
        conn = self._connection
        return f"{base}/{conn.owner}/{conn.collection}/{conn.branch}/{path.lstrip('/')}"

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------
    async def read_public(self, locator: str) -> Optional[bytes]:
        response = await self._send(
            "GET",
            locator,
            operation="read_public",
            authenticated=False,
            params={"t": str(_now_ms())},
        )
        if response.status_code == 404:
            return None
        self._raise_for_status(response, operation="read_public", path=locator)
        return response.content

    async def read_authenticated(self, path: str) -> Optional[RemoteFileHandle]:
        response = await self._send(
            "GET",
            self._contents_url(path),
            operation="read_authenticated",
            params={"ref": self._connection.branch},
        )
        if response.status_code == 404:
            self._logger.debug("remote_file_absent", path=path)
            return None
        self._raise_for_status(response, operation="read_authenticated", path=path)

        data = self._json_body(response, operation="read_authenticated", path=path)
        if not isinstance(data, dict) or "sha" not in data:
            raise StoreError(
                message=f"{path} is not a file",
                status_code=response.status_code,
                error_code="NOT_A_FILE",
                details={"path": path},
            )
        return RemoteFileHandle(
            path=path,
            content=data.get("content") or "",
            integrity_token=data["sha"],
        )

    async def write(
        self,
        path: str,
        content: str,
        message: str,
        expected_token: Optional[str] = None,
    ) -> str:
        body: dict[str, Any] = {
            "message": message,
            "content": content,
            "branch": self._connection.branch,
        }
        if expected_token is not None:
            body["sha"] = expected_token

        response = await self._send(
            "PUT",
            self._contents_url(path),
            operation="write",
            json=body,
        )
        self._raise_for_status(
            response,
            operation="write",
            path=path,
            expected_token=expected_token,
        )

        data = self._json_body(response, operation="write", path=path)
        try:
            new_token = data["content"]["sha"]
        except (KeyError, TypeError) as exc:
            raise StoreError(
                message=f"Write response for {path} carries no content sha",
                status_code=response.status_code,
                error_code="MALFORMED_RESPONSE",
                details={"operation": "write", "path": path},
            ) from exc
        self._logger.info(
            "remote_file_written",
            path=path,
            created=expected_token is None,
            integrity_token=new_token,
        )
        return new_token

    async def check_access(self) -> bool:
        response = await self._send("GET", self._repo_url, operation="check_access")
        if response.status_code in (401, 403, 404):
            self._logger.info("access_denied", status_code=response.status_code)
            return False
        self._raise_for_status(response, operation="check_access", path="")
        return True

    async def get_visibility(self) -> Visibility:
        response = await self._send(
            "GET",
            self._repo_url,
            operation="get_visibility",
            authenticated=bool(self._connection.credential),
        )
        self._raise_for_status(response, operation="get_visibility", path="")
        data = self._json_body(response, operation="get_visibility", path="")
        private = data.get("private") if isinstance(data, dict) else None
        if private is True:
            return Visibility.PRIVATE
        if private is False:
            return Visibility.PUBLIC
        return Visibility.UNKNOWN

    # -------------------------------------------------------------------------
    # Internal Helpers
    # -------------------------------------------------------------------------
    async def _send(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self._config.user_agent,
        }
        if authenticated:
            headers["Authorization"] = f"Bearer {self._require_credential(operation)}"

        try:
            return await self._http.request(
                method,
                url,
                headers=headers,
                timeout=self._config.timeout_seconds,
                **kwargs,
            )
        except httpx.TimeoutException as exc:
            raise NetworkError(
                message=f"Store request timed out after {self._config.timeout_seconds:g}s",
                error_code="STORE_TIMEOUT",
                details={"operation": operation, "method": method},
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(
                message=f"Store unreachable: {exc}",
                details={"operation": operation, "method": method},
            ) from exc

    def _raise_for_status(
        self,
        response: httpx.Response,
        *,
        operation: str,
        path: str,
        expected_token: Optional[str] = None,
    ) -> None:
        status = response.status_code
        if status < 400:
            return

        message = self._error_message(response)
        details: dict[str, Any] = {"operation": operation, "path": path}

        if status in (401, 403):
            raise AuthError(message=message, status_code=status, details=details)
        if status == 404:
            raise NotFoundError(message=message, status_code=status, details=details)
        if status == 409 or (status == 422 and "sha" in message.lower()):
            details["expected_token"] = expected_token
            raise ConflictError(message=message, status_code=status, details=details)
        raise StoreError(message=message, status_code=status, details=details)

    @staticmethod
    def _json_body(response: httpx.Response, *, operation: str, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError(
                message=f"Store returned a non-JSON body (HTTP {response.status_code})",
                status_code=response.status_code,
                error_code="MALFORMED_RESPONSE",
                details={"operation": operation, "path": path},
            ) from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.text[:200] or f"HTTP {response.status_code}"


# =============================================================================
# In-Memory Implementation
# =============================================================================
# Behaves like the GitHub store at the level the core relies on:
#   - integrity tokens are git blob SHA-1 hashes of the content
#   - returned base64 is wrapped at 60 columns
#   - a write with a stale (or missing) token is refused
#   - private repositories are invisible on the public path
#
# Several clients can share one repository (bind()), which is how tests
# simulate a second writer racing the first.
# =============================================================================
class _RepositoryState:
    def __init__(
        self,
        *,
        private: bool,
        exists: bool,
        accepted_credentials: Optional[set[str]],
    ) -> None:
        self.files: dict[str, bytes] = {}
        self.commits: list[tuple[str, str]] = []
        self.private = private
        self.exists = exists
        self.accepted_credentials = accepted_credentials
        self.failures: dict[str, deque[Exception]] = defaultdict(deque)


def git_blob_sha(raw: bytes) -> str:
    """Content hash the way git (and the contents API) computes it."""
    header = b"blob %d\0" % len(raw)
    return hashlib.sha1(header + raw).hexdigest()


class InMemoryRemoteStore(RemoteStore):
    """Dict-backed RemoteStore for development and testing.

    Attributes:
        commits: (path, message) of every successful write, oldest first.

    Example:
        >>> store = InMemoryRemoteStore(StoreConnection(owner="a", collection="b", credential="t"))
        >>> token = await store.write("hello.txt", to_transport(b"hi"), "add hello")
        >>> handle = await store.read_authenticated("hello.txt")
        >>> handle.integrity_token == token
        True
    """

    def __init__(
        self,
        connection: Optional[StoreConnection] = None,
        *,
        private: bool = False,
        exists: bool = True,
        accepted_credentials: Optional[set[str]] = None,
        _state: Optional[_RepositoryState] = None,
    ) -> None:
        super().__init__(
            connection
            or StoreConnection(owner="curator", collection="gallery", credential="test-token")
        )
        self._state = _state or _RepositoryState(
            private=private,
            exists=exists,
            accepted_credentials=accepted_credentials,
        )
        self._logger = logger.bind(component="in_memory_remote_store")

    def bind(self, connection: StoreConnection) -> InMemoryRemoteStore:
        """Return another client onto the same repository contents."""
        return InMemoryRemoteStore(connection, _state=self._state)

    # -------------------------------------------------------------------------
    # Test Controls
    # -------------------------------------------------------------------------
    @property
    def commits(self) -> list[tuple[str, str]]:
        return list(self._state.commits)

    @property
    def private(self) -> bool:
        return self._state.private

    @private.setter
    def private(self, value: bool) -> None:
        self._state.private = value

    def fail_next(self, operation: str, error: Exception) -> None:
        """Make the next call to `operation` raise `error`."""
        self._state.failures[operation].append(error)

    def get_file(self, path: str) -> Optional[bytes]:
        """Raw content of a path, bypassing the API."""
        return self._state.files.get(path)

    def put_file(self, path: str, raw: bytes) -> str:
        """Write raw content out-of-band (no token check, no commit log)."""
        self._state.files[path] = raw
        return git_blob_sha(raw)

    def integrity_token(self, path: str) -> Optional[str]:
        raw = self._state.files.get(path)
        return git_blob_sha(raw) if raw is not None else None

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------
    def locator_for(self, path: str) -> str:
        conn = self._connection
        return f"memory://{conn.owner}/{conn.collection}/{conn.branch}/{path.lstrip('/')}"

    async def read_public(self, locator: str) -> Optional[bytes]:
        await self._maybe_fail("read_public")
        prefix = self.locator_for("")
        if not locator.startswith(prefix) or self._state.private or not self._state.exists:
            return None
        return self._state.files.get(locator[len(prefix):])

    async def read_authenticated(self, path: str) -> Optional[RemoteFileHandle]:
        await self._maybe_fail("read_authenticated")
        self._authorize("read_authenticated")
        raw = self._state.files.get(path)
        if raw is None:
            return None
        encoded = to_transport(raw)
        wrapped = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60))
        return RemoteFileHandle(
            path=path,
            content=wrapped + "\n",
            integrity_token=git_blob_sha(raw),
        )

    async def write(
        self,
        path: str,
        content: str,
        message: str,
        expected_token: Optional[str] = None,
    ) -> str:
        await self._maybe_fail("write")
        self._authorize("write")
        try:
            raw = from_transport(content)
        except CodecError as exc:
            raise StoreError(
                message="content is not valid Base64",
                status_code=422,
                details={"path": path},
            ) from exc

        current = self._state.files.get(path)
        if expected_token is None and current is not None:
            raise ConflictError(
                message=f'Invalid request. "sha" wasn\'t supplied for {path}',
                status_code=422,
                details={"path": path, "expected_token": None},
            )
        if expected_token is not None and (
            current is None or git_blob_sha(current) != expected_token
        ):
            raise ConflictError(
                message=f"{path} does not match {expected_token}",
                status_code=409,
                details={"path": path, "expected_token": expected_token},
            )

        self._state.files[path] = raw
        self._state.commits.append((path, message))
        new_token = git_blob_sha(raw)
        self._logger.debug("remote_file_written", path=path, integrity_token=new_token)
        return new_token

    async def check_access(self) -> bool:
        await self._maybe_fail("check_access")
        credential = self._require_credential("check_access")
        if not self._state.exists:
            return False
        accepted = self._state.accepted_credentials
        return accepted is None or credential in accepted

    async def get_visibility(self) -> Visibility:
        await self._maybe_fail("get_visibility")
        if not self._state.exists:
            raise NotFoundError(message="Not Found", details={"operation": "get_visibility"})
        return Visibility.PRIVATE if self._state.private else Visibility.PUBLIC

    # -------------------------------------------------------------------------
    # Internal Helpers
    # -------------------------------------------------------------------------
    async def _maybe_fail(self, operation: str) -> None:
        # Yield like a real network call so concurrent coroutines interleave.
        await asyncio.sleep(0)
        queue = self._state.failures.get(operation)
        if queue:
            raise queue.popleft()

    def _authorize(self, operation: str) -> None:
        credential = self._require_credential(operation)
        accepted = self._state.accepted_credentials
        if accepted is not None and credential not in accepted:
            raise AuthError(
                message="Bad credentials",
                status_code=401,
                details={"operation": operation},
            )
        if not self._state.exists:
            raise NotFoundError(message="Not Found", details={"operation": operation})
