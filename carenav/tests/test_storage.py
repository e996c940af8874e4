import pytest

from carenav.integrations.storage import StorageClient, file_extension


def test_file_extension():
    assert file_extension("application/pdf", "denial.PDF") == ".pdf"
    assert file_extension("image/png", "scan") == ".png"
    assert file_extension("application/x-unknown", "blob") == ".bin"


@pytest.mark.asyncio
async def test_upload_read_delete(tmp_path):
    storage = StorageClient(root=tmp_path)
    stored = await storage.upload_file(b"%PDF-1.7", "letter.pdf", "application/pdf", folder="issues/abc")

    assert stored["file_key"].startswith("issues/abc/")
    assert stored["filename"].endswith(".pdf")
    assert stored["size_bytes"] == 8
    assert await storage.read_file(stored["file_key"]) == b"%PDF-1.7"

    assert await storage.delete_file(stored["file_key"]) is True
    assert await storage.delete_file(stored["file_key"]) is False


@pytest.mark.asyncio
async def test_rejects_path_traversal(tmp_path):
    storage = StorageClient(root=tmp_path / "root")
    with pytest.raises(ValueError):
        await storage.read_file("../outside.txt")


@pytest.mark.asyncio
async def test_status(tmp_path):
    status = await StorageClient(root=tmp_path / "new").status()
    assert status == {"name": "storage", "mode": "local", "healthy": True}
    assert (tmp_path / "new").is_dir()
