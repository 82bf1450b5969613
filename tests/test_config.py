from imagemarker.config import load_config


def test_load_config_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("data_root: /tmp/data\nmarker:\n  stroke_width: 5\n", encoding="utf-8")
    monkeypatch.setenv("IMAGEMARKER_CONFIG", str(config_path))

    config = load_config()
    assert config["data_root"] == "/tmp/data"
    assert config["marker"]["stroke_width"] == 5
    assert config["marker"]["stroke_color"] == [255, 0, 0]

    monkeypatch.delenv("IMAGEMARKER_CONFIG", raising=False)


def test_load_config_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setattr("imagemarker.config._candidate_config_paths", lambda: [tmp_path / "missing.yaml"])

    config = load_config()
    assert config["marker"]["delete_original"] is False
    assert config["logging"]["level"] == "INFO"
