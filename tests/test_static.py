import os
from dataclasses import replace
from pathlib import Path

import pytest

from tddapp.static import DirectoryFS, MemoryFS, clean_path

FILES = {"somedir/image.jpg": None, "css/site.css": b"body {}"}


def test_static_file_from_root(make_client):
    client = make_client(static_fs=MemoryFS(FILES))
    r = client.get("/somedir/image.jpg")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/jpeg"


def test_static_file_from_prefixed_path(make_client):
    client = make_client(static_fs=MemoryFS(FILES), static_prefix="/publicprefix")
    r = client.get("/publicprefix/css/site.css")
    assert r.status_code == 200
    assert r.content == b"body {}"
    assert r.headers["content-type"].startswith("text/css")


def test_prefixed_files_are_not_served_from_root(make_client):
    client = make_client(static_fs=MemoryFS(FILES), static_prefix="publicprefix/")
    assert client.get("/somedir/image.jpg").status_code == 404
    assert client.get("/publicprefix/somedir/image.jpg").status_code == 200


def test_missing_file_is_404(make_client):
    r = make_client().get("/pic/non-existing.jpg")
    assert r.status_code == 404


def test_bundled_stylesheet_is_served(make_client):
    r = make_client().get("/css/app.css")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/css")


def test_static_prefix_from_settings(make_client, settings):
    client = make_client(settings=replace(settings, static_prefix="/assets"), static_fs=MemoryFS(FILES))
    assert client.get("/assets/somedir/image.jpg").status_code == 200


@pytest.mark.parametrize("path, expected", [
    ("a/b.txt", "a/b.txt"),
    ("/a/./b.txt", "a/b.txt"),
    ("../etc/passwd", None),
    ("a/../../b", None),
    ("", None),
])
def test_clean_path(path, expected):
    assert clean_path(path) == expected


def test_directory_fs_finds_files_under_root(tmp_path: Path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "f.txt").write_bytes(b"hello")
    fs = DirectoryFS(tmp_path)
    expected = os.path.realpath(tmp_path / "sub" / "f.txt")
    assert fs.response("sub/f.txt").path == expected
    assert fs.response("/sub/f.txt").path == expected


def test_directory_fs_rejects_escapes_and_directories(tmp_path: Path):
    root = tmp_path / "public"
    root.mkdir()
    (tmp_path / "secret.txt").write_text("x")
    (root / "sub").mkdir()
    fs = DirectoryFS(root)
    for p in ("../secret.txt", "sub", "missing.txt", "a" * 300, "app\x00.css"):
        with pytest.raises(FileNotFoundError):
            fs.response(p)


@pytest.mark.parametrize("path", ["/" + "a" * 300, "/css/app%00.css", "/css"])
def test_unservable_paths_are_404(make_client, path):
    r = make_client().get(path)
    assert r.status_code == 404


def test_directory_files_are_served_over_http(make_client, tmp_path: Path):
    (tmp_path / "img").mkdir()
    (tmp_path / "img" / "logo.png").write_bytes(b"\x89PNG")
    r = make_client(static_fs=DirectoryFS(tmp_path), static_prefix="/public").get("/public/img/logo.png")
    assert r.status_code == 200
    assert r.content == b"\x89PNG"
    assert r.headers["content-type"] == "image/png"


def test_memory_fs_missing_file():
    with pytest.raises(FileNotFoundError):
        MemoryFS(FILES).response("nope.png")


def test_memory_fs_unknown_extension_is_octet_stream():
    r = MemoryFS({"blob.unknownext": b"x"}).response("blob.unknownext")
    assert r.media_type == "application/octet-stream"
