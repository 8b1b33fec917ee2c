import io
import re

from starlette.datastructures import UploadFile

from nudge_api.app.services.upload_service import UploadStorage


def test_generate_name_keeps_extension():
    name = UploadStorage.generate_name("photo.final.JPG")
    assert re.fullmatch(r"\d+-\d+\.JPG", name)
    assert re.fullmatch(r"\d+-\d+", UploadStorage.generate_name("README"))


def test_save_writes_file(tmp_path):
    storage = UploadStorage(str(tmp_path / "files"))
    upload = UploadFile(file=io.BytesIO(b"content"), filename="cover.png")

    path = storage.save(upload)

    assert path.startswith("/uploads/") and path.endswith(".png")
    stored = tmp_path / "files" / path.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"content"


def test_save_without_file(tmp_path):
    storage = UploadStorage(str(tmp_path))
    assert storage.save(None) is None
    assert storage.save(UploadFile(file=io.BytesIO(b""), filename="")) is None
    assert list(tmp_path.iterdir()) == []


def test_directory_recreated_when_missing(tmp_path):
    directory = tmp_path / "gone"
    storage = UploadStorage(str(directory))
    directory.rmdir()

    path = storage.save(UploadFile(file=io.BytesIO(b"x"), filename="a.txt"))

    assert (directory / path.rsplit("/", 1)[1]).exists()
