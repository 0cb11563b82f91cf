import os
from unittest.mock import MagicMock

import pytest
from scos_migrator.models import ComponentRecord, ComponentStatus, FailureReason
from scos_migrator.services.dockerfile_locator import DockerfileLocator, find_dockerfile

BASE_DOCKERFILE = "FROM registry.ci.openshift.org/ocp/builder:rhel-9-golang-1.22-openshift-4.16 AS builder\r\nRUN make\r\nFROM registry.ci.openshift.org/ocp/4.16:base-rhel9\r\n"


@pytest.fixture
def sources_dir(tmp_path):
    return tmp_path / "sources"


@pytest.fixture
def locator(sources_dir):
    svc = DockerfileLocator(str(sources_dir))
    svc.logger = MagicMock()
    return svc


def fetched(name="console"):
    return ComponentRecord(name=name, original_digest=f"reg/{name}@sha256:aaa").advance(
        ComponentStatus.FETCHED, vcs_url="https://github.com/openshift/console", vcs_ref="main", resolved_ref="main", revision="abc"
    )


def write(root, relative, content="FROM scratch\n", mtime=None):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content.encode())
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def test_candidates_are_searched_in_order(tmp_path):
    write(tmp_path, "images/Dockerfile")
    write(tmp_path, "Dockerfile.rhel9")
    write(tmp_path, "openshift/Dockerfile")
    assert find_dockerfile(str(tmp_path)) == "Dockerfile.rhel9"


def test_fallback_picks_newest_dockerfile(tmp_path):
    write(tmp_path, "deploy/Dockerfile.ocp", mtime=1000)
    write(tmp_path, "hack/Dockerfile.ci", mtime=2000)
    write(tmp_path, "README.md", mtime=3000)
    assert find_dockerfile(str(tmp_path)) == "hack/Dockerfile.ci"


def test_fallback_tie_is_lexicographic(tmp_path):
    write(tmp_path, "z/Dockerfile.a", mtime=1000)
    write(tmp_path, "a/Dockerfile.b", mtime=1000)
    assert find_dockerfile(str(tmp_path)) == "a/Dockerfile.b"


def test_fallback_ignores_git_dir(tmp_path):
    write(tmp_path, ".git/Dockerfile.x", mtime=5000)
    assert find_dockerfile(str(tmp_path)) is None


def test_locate_rewrites_base_image(locator, sources_dir):
    dockerfile = write(sources_dir / "console", "Dockerfile", BASE_DOCKERFILE)
    buildable = locator.locate(fetched())
    assert buildable.status == ComponentStatus.BUILDABLE
    assert buildable.dockerfile_path == "Dockerfile"
    assert buildable.rewritten_lines == 1
    assert dockerfile.read_bytes() == BASE_DOCKERFILE.replace(
        "ocp/4.16:base-rhel9", "origin/scos-4.16:base-stream9"
    ).encode()


def test_locate_without_base_image_keeps_file(locator, sources_dir):
    content = "FROM registry.access.redhat.com/ubi9/ubi:latest\n"
    dockerfile = write(sources_dir / "console", "build/Dockerfile", content, mtime=1000)
    buildable = locator.locate(fetched())
    assert buildable.status == ComponentStatus.BUILDABLE
    assert buildable.dockerfile_path == "build/Dockerfile"
    assert buildable.rewritten_lines == 0
    assert dockerfile.read_text() == content
    assert os.stat(dockerfile).st_mtime == 1000


def test_locate_no_dockerfile(locator, sources_dir):
    write(sources_dir / "console", "main.go", "package main\n")
    failed = locator.locate(fetched())
    assert failed.status == ComponentStatus.UNBUILDABLE
    assert failed.failure_reason == FailureReason.NO_DOCKERFILE


def test_locate_requires_fetched(locator):
    with pytest.raises(ValueError):
        locator.locate(ComponentRecord(name="console", original_digest="reg/console@sha256:aaa"))
