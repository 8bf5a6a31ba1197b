import os
import pytest
from coffeehub.errors import StoreError
from coffeehub.services.image_storage import ImageStorage
from coffeehub.tasks.images import delete_product_image_task


@pytest.fixture
def storage(tmp_path):
    return ImageStorage(str(tmp_path / "images"))


def test_save_get_delete(storage):
    path = storage.save(b"\xff\xd8jpeg", "prod/../1")
    assert os.path.dirname(path) == storage.base_dir
    assert path.endswith(".jpg")
    assert storage.get(path) == path
    with open(path, "rb") as fh:
        assert fh.read() == b"\xff\xd8jpeg"

    assert storage.delete(path) is True
    assert storage.get(path) is None
    assert storage.delete(path) is False


def test_empty_image_is_rejected(storage):
    with pytest.raises(StoreError):
        storage.save(b"", "p1")


def test_paths_outside_are_never_deleted(storage, tmp_path):
    outsider = tmp_path / "keep.jpg"
    outsider.write_bytes(b"x")
    assert storage.delete(str(outsider)) is False
    assert storage.delete(storage.base_dir) is False
    assert storage.delete("https://cdn.example.com/latte.jpg") is False
    assert outsider.exists()


def test_clear(storage):
    first = storage.save(b"a", "p1")
    second = storage.save(b"b", "p2")
    assert storage.clear() is True
    assert not os.path.exists(first)
    assert not os.path.exists(second)
    assert os.path.isdir(storage.base_dir)


def test_cleanup_task_runs_eagerly(app, storage):
    path = storage.save(b"a", "p1")
    result = delete_product_image_task.delay(path, storage.base_dir)
    assert result.get() is True
    assert not os.path.exists(path)
