from imagemarker.paths import ensure_directories, get_library_dir


def test_ensure_directories(tmp_path):
    dirs = ensure_directories(tmp_path)
    assert (tmp_path / "library").exists()
    assert (tmp_path / "logs").exists()
    assert dirs["library"] == tmp_path / "library"


def test_library_dir_override(tmp_path):
    dirs = ensure_directories(tmp_path)
    photos = tmp_path / "DCIM"
    assert get_library_dir({"library_dir": str(photos)}, dirs) == photos.resolve()
    assert get_library_dir({"library_dir": None}, dirs) == dirs["library"]
