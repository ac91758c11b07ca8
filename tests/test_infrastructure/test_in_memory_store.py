"""
Tests for curator.infrastructure.remote_store.InMemoryRemoteStore
===================================================================

The in-memory store is the fake every orchestration test runs against, so
it has to honour the same contract as the real client:
    - Integrity tokens are git blob hashes of the content
    - Conditional writes refuse stale or missing tokens
    - Reads return line-wrapped base64 like the real API
    - Private repositories are invisible on the public path
    - Credentials are checked; failures can be injected
"""

import pytest

from curator.core.config import StoreConnection
from curator.core.enums import Visibility
from curator.core.exceptions import AuthError, ConflictError, NetworkError, NotFoundError
from curator.infrastructure.manifest_codec import from_transport, to_transport
from curator.infrastructure.remote_store import InMemoryRemoteStore, git_blob_sha


def _connection(**overrides) -> StoreConnection:
    defaults = {"owner": "alexandra", "collection": "portfolio", "credential": "ghp_test"}
    defaults.update(overrides)
    return StoreConnection(**defaults)


# =============================================================================
# Tests: Integrity Tokens
# =============================================================================
class TestGitBlobSha:
    """git_blob_sha() matches git's own hashing."""

    def test_empty_blob(self) -> None:
        """The well-known hash of the empty blob."""
        assert git_blob_sha(b"") == "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"

    def test_hello_world(self) -> None:
        """`echo 'hello world' | git hash-object --stdin`."""
        assert git_blob_sha(b"hello world\n") == "3b18e512dba79e4c8300dd08aeb37f8e728b8dad"


# =============================================================================
# Tests: Conditional Write
# =============================================================================
class TestConditionalWrite:
    """The compare-and-swap primitive."""

    async def test_create_without_token(self) -> None:
        """A new path is created without a token."""
        store = InMemoryRemoteStore(_connection())
        token = await store.write("a.txt", to_transport(b"one"), "add a")
        assert token == git_blob_sha(b"one")
        assert store.get_file("a.txt") == b"one"
        assert store.commits == [("a.txt", "add a")]

    async def test_update_with_current_token(self) -> None:
        """The current token allows an update and yields a new token."""
        store = InMemoryRemoteStore(_connection())
        first = await store.write("a.txt", to_transport(b"one"), "add")
        second = await store.write("a.txt", to_transport(b"two"), "update", first)
        assert second != first
        assert store.get_file("a.txt") == b"two"

    async def test_stale_token_conflicts(self) -> None:
        """A stale token is refused and nothing is overwritten."""
        store = InMemoryRemoteStore(_connection())
        stale = await store.write("a.txt", to_transport(b"one"), "add")
        await store.write("a.txt", to_transport(b"two"), "update", stale)

        with pytest.raises(ConflictError) as exc_info:
            await store.write("a.txt", to_transport(b"three"), "late", stale)

        assert exc_info.value.status_code == 409
        assert store.get_file("a.txt") == b"two"

    async def test_missing_token_on_existing_file_conflicts(self) -> None:
        """Writing over an existing file without a token is refused."""
        store = InMemoryRemoteStore(_connection())
        await store.write("a.txt", to_transport(b"one"), "add")
        with pytest.raises(ConflictError) as exc_info:
            await store.write("a.txt", to_transport(b"two"), "blind")
        assert exc_info.value.status_code == 422

    async def test_token_for_absent_file_conflicts(self) -> None:
        """A token for a file that no longer exists is stale."""
        store = InMemoryRemoteStore(_connection())
        with pytest.raises(ConflictError):
            await store.write("a.txt", to_transport(b"x"), "add", "deadbeef")

    async def test_failed_write_not_logged_as_commit(self) -> None:
        """Only successful writes appear in the commit log."""
        store = InMemoryRemoteStore(_connection())
        await store.write("a.txt", to_transport(b"one"), "add")
        with pytest.raises(ConflictError):
            await store.write("a.txt", to_transport(b"two"), "blind")
        assert len(store.commits) == 1


# =============================================================================
# Tests: Reads
# =============================================================================
class TestReads:
    """Authenticated and public reads."""

    async def test_read_authenticated_absent(self) -> None:
        """A missing path reads as None."""
        store = InMemoryRemoteStore(_connection())
        assert await store.read_authenticated("gallery.json") is None

    async def test_read_authenticated_wraps_base64(self) -> None:
        """Content is returned wrapped at 60 columns with the current token."""
        store = InMemoryRemoteStore(_connection())
        raw = b"x" * 200
        token = store.put_file("big.bin", raw)

        handle = await store.read_authenticated("big.bin")

        assert handle.integrity_token == token
        lines = handle.content.rstrip("\n").split("\n")
        assert all(len(line) <= 60 for line in lines)
        assert len(lines) > 1
        assert from_transport(handle.content) == raw

    async def test_read_public_by_locator(self) -> None:
        """A public repository serves files by locator."""
        store = InMemoryRemoteStore(_connection())
        store.put_file("gallery.json", b"[]")
        assert await store.read_public(store.locator_for("gallery.json")) == b"[]"

    async def test_read_public_private_repo(self) -> None:
        """A private repository is invisible on the public path."""
        store = InMemoryRemoteStore(_connection(), private=True)
        store.put_file("gallery.json", b"[]")
        assert await store.read_public(store.locator_for("gallery.json")) is None

    async def test_read_public_needs_no_credential(self) -> None:
        """Public reads work without a credential."""
        store = InMemoryRemoteStore(_connection(credential=None))
        store.put_file("gallery.json", b"[]")
        assert await store.read_public(store.locator_for("gallery.json")) == b"[]"

    def test_locator_layout(self) -> None:
        """Locators follow owner/collection/branch/path."""
        store = InMemoryRemoteStore(_connection(branch="gh-pages"))
        assert store.locator_for("images/1-a.png") == (
            "memory://alexandra/portfolio/gh-pages/images/1-a.png"
        )


# =============================================================================
# Tests: Access & Visibility
# =============================================================================
class TestAccess:
    """Credential checks and visibility."""

    async def test_check_access_granted(self) -> None:
        """Any credential is accepted when no allow-list is set."""
        assert await InMemoryRemoteStore(_connection()).check_access() is True

    async def test_check_access_rejected_credential(self) -> None:
        """A credential outside the allow-list is denied."""
        store = InMemoryRemoteStore(_connection(), accepted_credentials={"other"})
        assert await store.check_access() is False

    async def test_check_access_missing_repo(self) -> None:
        """A repository that doesn't exist is denied."""
        store = InMemoryRemoteStore(_connection(), exists=False)
        assert await store.check_access() is False

    async def test_check_access_without_credential_raises(self) -> None:
        """No credential fails before touching the store."""
        store = InMemoryRemoteStore(_connection(credential=None))
        with pytest.raises(AuthError) as exc_info:
            await store.check_access()
        assert exc_info.value.error_code == "AUTH_REQUIRED"

    async def test_write_with_bad_credential(self) -> None:
        """A rejected credential cannot write."""
        store = InMemoryRemoteStore(_connection(), accepted_credentials={"other"})
        with pytest.raises(AuthError):
            await store.write("a.txt", to_transport(b"x"), "add")

    async def test_visibility(self) -> None:
        """Visibility follows the private flag."""
        store = InMemoryRemoteStore(_connection())
        assert await store.get_visibility() == Visibility.PUBLIC
        store.private = True
        assert await store.get_visibility() == Visibility.PRIVATE

    async def test_visibility_missing_repo(self) -> None:
        """A missing repository raises NotFoundError."""
        store = InMemoryRemoteStore(_connection(), exists=False)
        with pytest.raises(NotFoundError):
            await store.get_visibility()


# =============================================================================
# Tests: Shared State & Failure Injection
# =============================================================================
class TestSharedState:
    """bind() and fail_next()."""

    async def test_bound_clients_share_files(self) -> None:
        """A second client sees the first client's writes."""
        first = InMemoryRemoteStore(_connection())
        second = first.bind(_connection(credential="ghp_other"))
        await first.write("a.txt", to_transport(b"one"), "add")
        handle = await second.read_authenticated("a.txt")
        assert handle.integrity_token == git_blob_sha(b"one")

    async def test_fail_next_fires_once(self) -> None:
        """An injected failure affects only the next call."""
        store = InMemoryRemoteStore(_connection())
        store.fail_next("read_authenticated", NetworkError("connection reset"))

        with pytest.raises(NetworkError):
            await store.read_authenticated("a.txt")
        assert await store.read_authenticated("a.txt") is None
