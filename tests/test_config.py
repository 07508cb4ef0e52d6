from pixelbox.config import _coerce_scale, _coerce_size_label, editor_config, load_config


def test_load_config_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("data_root: /tmp/data\neditor:\n  scale: 5\n", encoding="utf-8")
    monkeypatch.setenv("PIXELBOX_CONFIG", str(config_path))

    config = load_config()
    assert config["data_root"] == "/tmp/data"
    assert config["editor"]["scale"] == 5
    assert config["editor"]["background"] == "#f0f0f0"

    monkeypatch.delenv("PIXELBOX_CONFIG", raising=False)


def test_load_config_ignores_non_mapping(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("PIXELBOX_CONFIG", str(config_path))

    config = load_config()
    assert config["editor"]["scale"] == 10


def test_editor_config_fills_missing_keys():
    editor = editor_config({"editor": {"tool": "fill"}})
    assert editor["tool"] == "fill"
    assert editor["sizes"] == ["30x30", "60x60", "90x90"]
    assert editor_config({"editor": "nonsense"})["tool"] == "draw"


def test_coerce_scale_falls_back():
    assert _coerce_scale("8", 10) == 8
    assert _coerce_scale(0, 10) == 10
    assert _coerce_scale("bad", 10) == 10


def test_coerce_size_label():
    sizes = ["30x30", "60x60"]
    assert _coerce_size_label("60x60", sizes, "30x30") == "60x60"
    assert _coerce_size_label("1x1", sizes, "30x30") == "30x30"
    assert _coerce_size_label("1x1", [], "30x30") == "30x30"


def test_load_config_falls_back_on_malformed_yaml(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("editor: [unclosed\n", encoding="utf-8")

    config = load_config(config_path)
    assert config["editor"]["scale"] == 10


def test_load_config_explicit_missing_path_gives_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")
    assert config["editor"]["size"] == "30x30"


def test_load_config_reads_xdg_config_home(tmp_path, monkeypatch):
    monkeypatch.delenv("PIXELBOX_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    xdg = tmp_path / "xdg"
    (xdg / "pixelbox").mkdir(parents=True)
    (xdg / "pixelbox" / "config.yaml").write_text("editor:\n  tool: pick\n", encoding="utf-8")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))

    assert load_config()["editor"]["tool"] == "pick"
