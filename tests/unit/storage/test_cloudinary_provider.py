"""Unit tests for the Cloudinary asset store."""

from typing import Any

import cloudinary.exceptions
import cloudinary.uploader
import pytest

from core.exceptions import AssetStoreError
from infrastructure.storage.cloudinary_provider import CloudinaryAssetStore


def _store() -> CloudinaryAssetStore:
    return CloudinaryAssetStore(
        cloud_name="demo",
        api_key="key-123",
        api_secret="shh",
        folder="members",
        transformation="c_fill,w_500",
        timeout=5,
    )


class _Recorder:
    """Stands in for an SDK uploader function, recording its calls."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    def __call__(self, *args: Any, **options: Any) -> Any:
        self.calls.append((args, options))
        if self.error:
            raise self.error
        return self.result


class TestUpload:
    @pytest.mark.asyncio
    async def test_returns_secure_url_and_public_id(self, monkeypatch: pytest.MonkeyPatch) -> None:
        upload = _Recorder(
            result={
                "secure_url": "https://res.cloudinary.com/demo/image/upload/members/abc.jpg",
                "public_id": "members/abc",
            }
        )
        monkeypatch.setattr(cloudinary.uploader, "upload", upload)

        result = await _store().upload(b"\xff\xd8jpeg", "me.jpg")

        assert result.public_id == "members/abc"
        assert result.url.startswith("https://res.cloudinary.com/")
        (args, options), = upload.calls
        assert args[0].read() == b"\xff\xd8jpeg"
        assert options["folder"] == "members"
        assert options["transformation"] == "c_fill,w_500"
        assert options["cloud_name"] == "demo"
        assert options["api_key"] == "key-123"
        assert options["api_secret"] == "shh"
        assert options["timeout"] == 5

    @pytest.mark.asyncio
    async def test_surfaces_store_error_message(self, monkeypatch: pytest.MonkeyPatch) -> None:
        upload = _Recorder(error=cloudinary.exceptions.Error("Invalid image file"))
        monkeypatch.setattr(cloudinary.uploader, "upload", upload)

        with pytest.raises(AssetStoreError) as exc_info:
            await _store().upload(b"not-an-image")

        assert exc_info.value.message == "Invalid image file"

    @pytest.mark.asyncio
    async def test_incomplete_response_is_an_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cloudinary.uploader, "upload", _Recorder(result={"public_id": "x"}))

        with pytest.raises(AssetStoreError):
            await _store().upload(b"jpeg")

    @pytest.mark.asyncio
    async def test_empty_file_is_rejected_without_calling_store(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        upload = _Recorder()
        monkeypatch.setattr(cloudinary.uploader, "upload", upload)

        with pytest.raises(AssetStoreError):
            await _store().upload(b"")

        assert upload.calls == []


class TestRemove:
    @pytest.mark.asyncio
    async def test_destroys_public_id(self, monkeypatch: pytest.MonkeyPatch) -> None:
        destroy = _Recorder(result={"result": "ok"})
        monkeypatch.setattr(cloudinary.uploader, "destroy", destroy)

        await _store().remove("members/abc")

        (args, options), = destroy.calls
        assert args == ("members/abc",)
        assert options["cloud_name"] == "demo"

    @pytest.mark.asyncio
    async def test_missing_asset_counts_as_removed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cloudinary.uploader, "destroy", _Recorder(result={"result": "not found"}))

        await _store().remove("members/gone")

    @pytest.mark.asyncio
    async def test_unexpected_result_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cloudinary.uploader, "destroy", _Recorder(result={"result": "error"}))

        with pytest.raises(AssetStoreError) as exc_info:
            await _store().remove("members/abc")

        assert exc_info.value.message == "Asset removal failed: error"

    @pytest.mark.asyncio
    async def test_store_error_message_is_verbatim(self, monkeypatch: pytest.MonkeyPatch) -> None:
        destroy = _Recorder(error=cloudinary.exceptions.Error("Resource not accessible"))
        monkeypatch.setattr(cloudinary.uploader, "destroy", destroy)

        with pytest.raises(AssetStoreError) as exc_info:
            await _store().remove("members/abc")

        assert exc_info.value.message == "Resource not accessible"
