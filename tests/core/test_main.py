# type: ignore
import json
import os
import sys

import pytest
from common.images import png_bytes

from picset.core.main import guess_media_type, main

from ._manifests import PIPELINE_MANIFEST, set_env, write_manifest


@pytest.fixture
def project(tmp_path, monkeypatch) -> str:
    path = str(tmp_path)
    set_env(monkeypatch, path)
    return write_manifest(path, PIPELINE_MANIFEST)


def run(monkeypatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["picset", *args])
    main()


def test_guess_media_type():
    assert guess_media_type("photo.jpg") == "image/jpeg"
    assert guess_media_type("photo.PNG") == "image/png"
    assert guess_media_type("photo") == "application/octet-stream"


@pytest.mark.parametrize("use_async", [False, True])
def test_ingest_and_get(project: str, monkeypatch, capsys, use_async: bool):
    file = os.path.join(project, "photo.png")
    with open(file, "wb") as f:
        f.write(png_bytes(400, 300))
    args = ["ingest", file, "--uploader", "u1", "--event", "e1"]
    args += ["--path", project, "--tag", "local"]
    if use_async:
        args.append("--async")
    run(monkeypatch, *args)
    result = json.loads(capsys.readouterr().out)
    assert result["record"]["eventId"] == "e1"
    assert result["record"]["sourceFormat"] == "PNG"
    assert result["variants"]["tiny"]["width"] == 300
    webp_key = result["variants"]["thumb"]["webpKey"]
    assert webp_key.startswith("events/e1/")
    assert os.path.isfile(os.path.join(project, "store", "images", webp_key))

    run(monkeypatch, "get", result["id"], "--path", project, "--tag", "local")
    record = json.loads(capsys.readouterr().out)
    assert record == result["record"]


def test_ingest_rejected(project: str, monkeypatch, capsys):
    file = os.path.join(project, "notes.txt")
    with open(file, "wb") as f:
        f.write(b"not an image")
    with pytest.raises(SystemExit) as exc_info:
        run(
            monkeypatch,
            "ingest",
            file,
            "--uploader",
            "u1",
            "--path",
            project,
        )
    assert exc_info.value.code == 1
    assert "InputValidationFailure" in capsys.readouterr().err


def test_get_missing(project: str, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run(monkeypatch, "get", "missing", "--path", project, "--tag", "local")
    assert exc_info.value.code == 1
    assert "NotFoundError" in capsys.readouterr().err


def test_ingest_requires_uploader(project: str, monkeypatch):
    with pytest.raises(SystemExit) as exc_info:
        run(monkeypatch, "ingest", "photo.png", "--path", project)
    assert exc_info.value.code == 2
