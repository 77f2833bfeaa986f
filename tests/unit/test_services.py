"""Unit tests for catalog and waitlist services."""

from unittest.mock import AsyncMock

import httpx
import pytest

from appdiff.core.exceptions import DuplicateEntryError, PackageNotFoundError, StoreError
from appdiff.core.types import FailureReason
from appdiff.services import CatalogService, WaitlistService
from appdiff.services.waitlist import ALREADY_SUBSCRIBED, INVALID_EMAIL, SUBMISSION_FAILED, SUBSCRIBED
from appdiff.storage import InMemoryVersionStore, RestVersionStore


@pytest.mark.asyncio
class TestCatalogService:
    """Tests for browsing packages."""

    async def test_list_apps_groups_by_package(self, memory_store):
        result = await CatalogService(memory_store).list_apps()
        assert result.success
        # Notes was extracted most recently
        assert [g.package_name for g in result.data] == ["org.sample.notes", "com.example.camera"]
        camera = result.data[1]
        assert [v.version_name for v in camera.versions] == ["1.1.0", "1.0.0", "0.9.0"]
        assert result.metadata["total_records"] == 4

    async def test_list_apps_search(self, memory_store):
        result = await CatalogService(memory_store).list_apps("snap")
        assert [g.package_name for g in result.data] == ["com.example.camera"]

        result = await CatalogService(memory_store).list_apps("nothing-matches")
        assert result.success
        assert result.data == []

    async def test_list_apps_store_error(self, memory_store):
        memory_store.fail_with = StoreError(message="offline")
        result = await CatalogService(memory_store).list_apps()
        assert not result.success
        assert result.error == "Failed to load apps"
        assert result.reason == FailureReason.STORE_ERROR

    async def test_load_package(self, memory_store):
        result = await CatalogService(memory_store).load_package("com.example.camera")
        assert result.success
        assert result.data.display_name == "Snap Camera"
        assert [v.version_code for v in result.data.versions] == [99, 100, 110]

    async def test_load_package_not_found(self, memory_store):
        result = await CatalogService(memory_store).load_package("com.unknown")
        assert not result.success
        assert result.reason == FailureReason.NOT_FOUND
        assert result.metadata["package_name"] == "com.unknown"

    async def test_load_package_store_error(self, memory_store):
        memory_store.fail_with = StoreError(message="offline")
        result = await CatalogService(memory_store).load_package("com.example.camera")
        assert not result.success
        assert result.error == "Failed to load app versions"
        assert result.reason == FailureReason.STORE_ERROR

    async def test_get_package_raises_not_found(self):
        with pytest.raises(PackageNotFoundError):
            await CatalogService(InMemoryVersionStore()).get_package("com.unknown")

    async def test_app_name_failure_degrades(self, records):
        """Test that a failing name lookup still shows the versions."""
        store = InMemoryVersionStore(records)
        store.fetch_app_name = AsyncMock(side_effect=StoreError(message="timeout"))

        result = await CatalogService(store).load_package("com.example.camera")
        assert result.success
        assert result.data.app_name is None
        assert result.data.display_name == "com.example.camera"

    async def test_app_name_garbled_response_degrades(self, version_rows):
        """Test that an unreadable name lookup from the REST store still shows the versions."""

        def handler(request):
            if request.url.params.get("select") == "app_name":
                return httpx.Response(200, content=b"<html>gateway</html>")
            return httpx.Response(200, json=version_rows[:3])

        client = httpx.AsyncClient(
            base_url="https://store.test/rest/v1",
            transport=httpx.MockTransport(handler),
        )
        store = RestVersionStore("https://store.test", "test-key", client=client)
        result = await CatalogService(store).load_package("com.example.camera")
        await client.aclose()

        assert result.success
        assert result.data.app_name is None
        assert [v.version_code for v in result.data.versions] == [99, 100, 110]


@pytest.mark.asyncio
class TestWaitlistService:
    """Tests for waitlist signups."""

    async def test_subscribe(self):
        store = InMemoryVersionStore()
        result = await WaitlistService(store).subscribe("someone@example.com", referral_source="twitter")
        assert result.success
        assert result.message == SUBSCRIBED
        assert store.waitlist[0].ip_address == "unknown"
        assert store.waitlist[0].referral_source == "twitter"

    async def test_duplicate_is_success(self):
        store = InMemoryVersionStore()
        service = WaitlistService(store)
        await service.subscribe("someone@example.com")

        result = await service.subscribe("someone@example.com", ip_address="10.0.0.2")
        assert result.success
        assert result.already_subscribed
        assert result.message == ALREADY_SUBSCRIBED
        assert len(store.waitlist) == 1

    async def test_invalid_email(self):
        store = InMemoryVersionStore()
        result = await WaitlistService(store).subscribe("not-an-email")
        assert not result.success
        assert result.message == INVALID_EMAIL
        assert store.waitlist == []

    async def test_empty_email(self):
        result = await WaitlistService(InMemoryVersionStore()).subscribe("")
        assert not result.success
        assert result.message == INVALID_EMAIL

    async def test_store_error(self):
        store = AsyncMock()
        store.insert_waitlist.side_effect = StoreError(message="offline")
        result = await WaitlistService(store).subscribe("someone@example.com")
        assert not result.success
        assert result.message == SUBMISSION_FAILED

    async def test_duplicate_from_store(self):
        store = AsyncMock()
        store.insert_waitlist.side_effect = DuplicateEntryError(message="exists", error_code="23505")
        result = await WaitlistService(store).subscribe("someone@example.com")
        assert result.success
        assert result.already_subscribed
