import json
import os
from unittest.mock import patch

import pytest

from bustkit.cli.bust import EXIT_CONFIG_FAILURE, EXIT_HASHWALKER_FAILURE, EXIT_SUCCESS, main
from bustkit.core import pipeline
from bustkit.core.errors import HashError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BUSTKIT_ROOT", "BUSTKIT_OUT_FILE", "BUSTKIT_MODE", "BUSTKIT_HASH_LENGTH"):
        monkeypatch.delenv(name, raising=False)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_default_run_writes_manifest_into_root(asset_tree):
    rc = main(["-r", str(asset_tree.root), "--hash-length", "6"])

    assert rc == EXIT_SUCCESS
    c_js = os.path.join("sub", "c.js")
    assert _read(asset_tree.root / "asset-manifest.json") == {
        "a.css": asset_tree.expected("a.css", 6),
        c_js: asset_tree.expected(c_js, 6),
    }


def test_extensions_repeated_and_comma_separated(asset_tree):
    rc = main(["-r", str(asset_tree.root), "-e", "txt", "-e", "css,js", "--hash-length", "4"])

    assert rc == EXIT_SUCCESS
    assert sorted(_read(asset_tree.root / "asset-manifest.json")) == sorted(
        ["a.css", "b.txt", os.path.join("sub", "c.js")]
    )


def test_out_file_with_directory(asset_tree, tmp_path):
    out_dir = tmp_path / "build"
    out_dir.mkdir()
    out = out_dir / "manifest.json"

    rc = main(["-r", str(asset_tree.root), "-o", str(out)])

    assert rc == EXIT_SUCCESS
    assert "a.css" in _read(out)
    assert not (asset_tree.root / "asset-manifest.json").exists()


def test_incremental_merges_into_existing_manifest(asset_tree):
    out = asset_tree.root / "asset-manifest.json"
    out.write_text(json.dumps({"gone.css": "gone.123.css", "a.css": "a.stale.css"}), encoding="utf-8")

    rc = main(["-r", str(asset_tree.root), "-i", "--hash-length", "6"])

    assert rc == EXIT_SUCCESS
    data = _read(out)
    assert data["gone.css"] == "gone.123.css"
    assert data["a.css"] == asset_tree.expected("a.css", 6)
    assert os.path.join("sub", "c.js") in data


def test_incremental_without_existing_manifest(asset_tree):
    rc = main(["-r", str(asset_tree.root), "--incremental"])
    assert rc == EXIT_SUCCESS
    assert len(_read(asset_tree.root / "asset-manifest.json")) == 2


def test_incremental_with_broken_manifest_fails_before_walking(asset_tree):
    out = asset_tree.root / "asset-manifest.json"
    out.write_text("{broken", encoding="utf-8")
    before = sorted(p.name for p in asset_tree.root.rglob("*"))

    rc = main(["-r", str(asset_tree.root), "-i"])

    assert rc == EXIT_CONFIG_FAILURE
    assert sorted(p.name for p in asset_tree.root.rglob("*")) == before
    assert out.read_text(encoding="utf-8") == "{broken"


def test_invalid_mode(asset_tree, caplog):
    rc = main(["-r", str(asset_tree.root), "-m", "move"])
    assert rc == EXIT_CONFIG_FAILURE
    assert "copy" in caplog.text and "rename" in caplog.text


@pytest.mark.parametrize("length", ["0", "abc", "40"])
def test_invalid_hash_length(asset_tree, length):
    assert main(["-r", str(asset_tree.root), "--hash-length", length]) == EXIT_CONFIG_FAILURE


def test_missing_root_option(caplog):
    assert main([]) == EXIT_CONFIG_FAILURE
    assert "Missing root directory" in caplog.text


def test_root_does_not_exist(tmp_path):
    assert main(["-r", str(tmp_path / "nope")]) == EXIT_CONFIG_FAILURE


def test_out_dir_does_not_exist(asset_tree, tmp_path):
    rc = main(["-r", str(asset_tree.root), "-o", str(tmp_path / "nope" / "m.json")])
    assert rc == EXIT_CONFIG_FAILURE


def test_root_from_environment(asset_tree, monkeypatch):
    monkeypatch.setenv("BUSTKIT_ROOT", str(asset_tree.root))
    monkeypatch.setenv("BUSTKIT_MODE", "rename")
    assert main([]) == EXIT_SUCCESS
    assert not (asset_tree.root / "a.css").exists()


def test_walker_failure_writes_nothing(asset_tree, caplog):
    async def broken_hash(path):
        raise HashError("Error during hash calculation")

    with patch.object(pipeline, "hash_file_content", new=broken_hash):
        rc = main(["-r", str(asset_tree.root)])

    assert rc == EXIT_HASHWALKER_FAILURE
    assert not (asset_tree.root / "asset-manifest.json").exists()
    assert "HashError" in caplog.text


def test_config_file_and_cli_override(asset_tree, tmp_path):
    cfg = tmp_path / "bustkit.yml"
    cfg.write_text(
        f"root_directory: {json.dumps(str(asset_tree.root))}\n"
        "mode: rename\n"
        "hash-length: 8\n"
        "extensions: [css]\n",
        encoding="utf-8",
    )

    rc = main(["--config", str(cfg), "-m", "copy"])

    assert rc == EXIT_SUCCESS
    assert (asset_tree.root / "a.css").exists()
    assert _read(asset_tree.root / "asset-manifest.json") == {"a.css": asset_tree.expected("a.css", 8)}


def test_broken_config_file(tmp_path):
    cfg = tmp_path / "bustkit.yml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")
    assert main(["--config", str(cfg)]) == EXIT_CONFIG_FAILURE


def test_max_open_files_option(asset_tree):
    rc = main(["-r", str(asset_tree.root), "--max-open-files", "1"])
    assert rc == EXIT_SUCCESS
    assert len(_read(asset_tree.root / "asset-manifest.json")) == 2


def test_undecodable_config_file(tmp_path):
    cfg = tmp_path / "bustkit.yml"
    cfg.write_bytes(b"mode: \xff\xfe\n")
    assert main(["--config", str(cfg)]) == EXIT_CONFIG_FAILURE


def test_incremental_with_undecodable_manifest(asset_tree):
    out = asset_tree.root / "asset-manifest.json"
    out.write_bytes(b'{"a.css": "\xff\xfe"}')

    rc = main(["-r", str(asset_tree.root), "-i"])

    assert rc == EXIT_CONFIG_FAILURE
    assert out.read_bytes() == b'{"a.css": "\xff\xfe"}'


@pytest.mark.parametrize("value", ["abc", "0"])
def test_invalid_max_open_files(asset_tree, value):
    assert main(["-r", str(asset_tree.root), "--max-open-files", value]) == EXIT_CONFIG_FAILURE
