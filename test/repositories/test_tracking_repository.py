import os
import shutil

import pytest
from scos_migrator.models import ComponentRecord, ComponentStatus, FailureReason, ReleaseCommand
from scos_migrator.repositories import TrackingRepository
from scos_migrator.utils.yaml_loader import get_yaml_instance, load_yaml_file

ASSETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "assets")


@pytest.fixture
def state_dir(tmp_path):
    dest = tmp_path / "state"
    dest.mkdir()
    shutil.copy(os.path.join(ASSETS_DIR, "records.yaml"), dest / "records.yaml")
    return dest


@pytest.fixture
def records():
    base = ComponentRecord(name="cvo", original_digest="reg/cvo@sha256:bbb")
    return [
        ComponentRecord(name="x", original_digest="reg/x@sha256:aaa").fail(FailureReason.NO_DOCKERFILE, vcs_url="https://github.com/openshift/x", vcs_ref="master", resolved_ref="master", revision="abc"),
        base.advance(ComponentStatus.BUILDABLE, vcs_url="https://github.com/openshift/cvo", vcs_ref="master", resolved_ref="main", revision="def", dockerfile_path="Dockerfile")
            .advance(ComponentStatus.SUCCEEDED, replacement_image="reg2/cvo@sha256:ccc"),
        ComponentRecord(name="y", original_digest="reg/y@sha256:ddd").advance(ComponentStatus.BUILDABLE, vcs_url="https://github.com/openshift/y", revision="123", dockerfile_path="images/Dockerfile")
            .fail(FailureReason.PUSH_FAILED),
    ]


def read(path):
    return load_yaml_file(get_yaml_instance(), str(path))


def test_find_all_reads_records(state_dir):
    records = TrackingRepository(str(state_dir)).find_all()
    assert [r.name for r in records] == ["cluster-version-operator", "console"]
    assert records[0].status == ComponentStatus.BUILDABLE
    assert records[0].resolved_ref == "main"
    assert records[1].failure_reason == FailureReason.CLONE_FAILED


def test_find_all_without_state(tmp_path):
    assert TrackingRepository(str(tmp_path / "missing")).find_all() == []


def test_invalid_records_file(tmp_path):
    (tmp_path / "records.yaml").write_text("records:\n- name: x\n  original_digest: y\n  status: succeeded\n")
    with pytest.raises(ValueError, match="Invalid records.yaml"):
        TrackingRepository(str(tmp_path)).find_all()


def test_save_round_trips_records(tmp_path, records):
    repo = TrackingRepository(str(tmp_path / "state"))
    repo.save(records)
    assert repo.find_all() == records


def test_save_writes_tracking_collections(tmp_path, records):
    state = tmp_path / "state"
    TrackingRepository(str(state)).save(records)

    assert read(state / "buildable.yaml") == ["cvo", "y"]
    assert dict(read(state / "unbuildable.yaml")) == {
        "x": {"reason": "no_dockerfile", "image": "reg/x@sha256:aaa", "vcs_url": "https://github.com/openshift/x", "vcs_ref": "master"}
    }
    results = read(state / "build-results.yaml")
    assert dict(results["cvo"]) == {"outcome": "succeeded", "image": "reg2/cvo@sha256:ccc"}
    assert dict(results["y"]) == {"outcome": "failed", "reason": "push_failed"}
    assert dict(read(state / "replacements.yaml")) == {"cvo": "reg2/cvo@sha256:ccc"}
    assert set(read(state / "metadata.yaml")) == {"x", "cvo", "y"}


def test_save_is_idempotent(tmp_path, records):
    state = tmp_path / "state"
    repo = TrackingRepository(str(state))
    repo.save(records)
    first = {name: (state / name).read_text() for name in os.listdir(state)}
    repo.save(records)
    second = {name: (state / name).read_text() for name in os.listdir(state)}
    assert first == second


def test_manifest_final_mapping_and_command(tmp_path):
    state = tmp_path / "state"
    repo = TrackingRepository(str(state))
    repo.save_manifest({"x": "reg/x@sha256:aaa"})
    repo.save_final_mapping({"x": "reg/x@sha256:aaa"})
    repo.save_release_command(ReleaseCommand(from_release="a", to_image="b", mappings=["x=reg/x@sha256:aaa"]))

    assert repo.load_manifest() == {"x": "reg/x@sha256:aaa"}
    assert dict(read(state / "final-mapping.yaml")) == {"x": "reg/x@sha256:aaa"}
    command = read(state / "release-command.yaml")
    assert list(command["argv"])[:4] == ["oc", "adm", "release", "new"]
