# type: ignore
import pytest
from common.images import jpeg_bytes

from picset.core import Loader
from picset.core.exceptions import LoadError
from picset.core.manifest import Manifest
from picset.pipeline import ImagePipeline
from picset.storage.document_store.providers.sqlite import SQLite
from picset.storage.object_store.providers.file_system import FileSystem
from picset.storage.object_store.providers.memory import Memory

from ._manifests import (
    CIRCULAR_MANIFEST,
    PIPELINE_MANIFEST,
    UNKNOWN_PROVIDER_MANIFEST,
    set_env,
    write_manifest,
)


@pytest.fixture
def project(tmp_path, monkeypatch) -> str:
    path = str(tmp_path)
    set_env(monkeypatch, path)
    return write_manifest(path, PIPELINE_MANIFEST)


def test_parse(project: str):
    manifest = Manifest.parse(path=f"{project}/picset.yaml")
    assert manifest.metadata.name == "picset-test"
    assert list(manifest.components.keys()) == [
        "images",
        "records",
        "pipeline",
    ]
    assert manifest.components["records"].providers["local"].type == "sqlite"
    assert manifest.bindings["local"] == {"images": "local"}


def test_load_pipeline(project: str):
    loader = Loader(path=project)
    pipeline = loader.load_component("pipeline", tag="local")
    assert isinstance(pipeline, ImagePipeline)
    assert pipeline.__handle__ == "pipeline"
    assert pipeline.config.quality == 70
    assert pipeline.config.parallel is False
    assert pipeline.config.public_base_url is None

    provider = pipeline.object_store.__provider__
    assert isinstance(provider, FileSystem)
    assert provider.store_path.endswith("store")
    assert isinstance(pipeline.document_store.__provider__, SQLite)
    assert pipeline.document_store.collection == "images"
    # Components are built once per loader.
    assert loader.load_component("images", tag="local") is (
        pipeline.object_store
    )

    result = pipeline.ingest(
        content=jpeg_bytes(640, 480),
        media_type="image/jpeg",
        uploader_id="u1",
        association_id="e1",
    ).result
    assert result.variants["original"].width == 640
    assert pipeline.get(id=result.id).result == result.record


def test_load_first_provider(project: str):
    images = Loader(path=project).load_component("images")
    assert isinstance(images.__provider__, Memory)


def test_load_env_variable(project: str, monkeypatch):
    monkeypatch.setenv("PICSET_TEST_BASE_URL", "https://cdn.example.com")
    manifest = PIPELINE_MANIFEST.replace(
        "      config: ${variables.config}",
        "      config:\n"
        "        public_base_url: ${variables.public_base_url}",
    )
    write_manifest(project, manifest)
    pipeline = Loader(path=project).load_component("pipeline")
    assert pipeline.config.public_base_url == "https://cdn.example.com"


def test_load_manifest_name(tmp_path, monkeypatch):
    path = str(tmp_path)
    set_env(monkeypatch, path)
    write_manifest(path, PIPELINE_MANIFEST, name="other.yaml")
    images = Loader(path=path, manifest="other.yaml").load_component(
        "images"
    )
    assert images.__handle__ == "images"


@pytest.mark.parametrize(
    "handle, tag",
    [("missing", None), ("images", "missing"), ("images", "broken")],
)
def test_load_errors(project: str, handle: str, tag: str | None):
    with pytest.raises(LoadError):
        Loader(path=project).load_component(handle, tag=tag)


def test_load_circular(tmp_path):
    path = write_manifest(str(tmp_path), CIRCULAR_MANIFEST)
    with pytest.raises(LoadError) as exc_info:
        Loader(path=path).load_component("first")
    assert "Circular" in str(exc_info.value)


def test_load_unknown_provider(tmp_path):
    path = write_manifest(str(tmp_path), UNKNOWN_PROVIDER_MANIFEST)
    with pytest.raises(LoadError):
        Loader(path=path).load_component("images")
