"""Asset store provider protocol."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class AssetUploadResult:
    """Location and identifier of an uploaded asset."""

    url: str
    public_id: str


class IAssetStore(Protocol):
    """Protocol for remote binary asset stores.

    Implementations raise ``AssetStoreError`` with the store's own message
    when an upload or removal fails.
    """

    async def upload(self, content: bytes, filename: str | None = None) -> AssetUploadResult:
        """
        Upload a photo.

        Args:
            content: Raw image bytes
            filename: Original client filename, if known

        Returns:
            The public URL and store identifier of the asset
        """
        ...

    async def remove(self, public_id: str) -> None:
        """
        Remove a previously uploaded asset.

        Args:
            public_id: Store identifier returned by ``upload``
        """
        ...
