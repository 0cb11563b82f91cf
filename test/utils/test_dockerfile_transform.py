import pytest
from scos_migrator.utils.dockerfile_transform import BASE_IMAGE_RULES, rewrite_line, transform_dockerfile

DOCKERFILE = """\
FROM registry.ci.openshift.org/ocp/builder:rhel-9-golang-1.22-openshift-4.16 AS builder
WORKDIR /go/src/github.com/openshift/cluster-version-operator
COPY . .
RUN make build

FROM registry.ci.openshift.org/ocp/4.16:base-rhel9
# keep me: FROM registry.ci.openshift.org/ocp/4.16:base-rhel9
COPY --from=builder /go/src/github.com/openshift/cluster-version-operator/_output/cluster-version-operator /usr/bin/
ENTRYPOINT ["/usr/bin/cluster-version-operator"]
"""


def test_rewrites_rhel9_base_image():
    result = transform_dockerfile(DOCKERFILE)
    assert result.rewritten_lines == 1
    lines = result.content.splitlines()
    assert lines[5] == "FROM registry.ci.openshift.org/origin/scos-4.16:base-stream9"
    assert lines[0] == DOCKERFILE.splitlines()[0]
    assert lines[6] == "# keep me: FROM registry.ci.openshift.org/ocp/4.16:base-rhel9"


def test_only_base_image_lines_change():
    result = transform_dockerfile(DOCKERFILE)
    before = DOCKERFILE.splitlines(keepends=True)
    after = result.content.splitlines(keepends=True)
    assert len(before) == len(after)
    assert [i for i, (a, b) in enumerate(zip(before, after)) if a != b] == [5]


def test_builder_image_on_same_host_is_untouched():
    content = "FROM host/ocp/4.16:base-rhel9\nFROM host/ocp/4.16:base-golang\n"
    result = transform_dockerfile(content)
    assert result.content == "FROM host/origin/scos-4.16:base-stream9\nFROM host/ocp/4.16:base-golang\n"


def test_rhel8_base_image():
    assert rewrite_line("FROM quay.io/ocp/4.15:base-rhel8\n") == "FROM quay.io/origin/scos-4.15:base-stream8\n"


def test_stage_alias_and_crlf_are_preserved():
    line = "FROM host/ocp/4.16:base-rhel9 AS final\r\n"
    assert rewrite_line(line) == "FROM host/origin/scos-4.16:base-stream9 AS final\r\n"


@pytest.mark.parametrize("line", [
    "FROM host/ocp/4.16:base-rhel9-extra\n",
    "FROM host/ocp/builder:rhel-9-golang-1.22-openshift-4.16\n",
    "FROM registry.access.redhat.com/ubi9/ubi-minimal:latest\n",
    "RUN echo FROM host/ocp/4.16:base-rhel9\n",
    "FROM host/origin/scos-4.16:base-stream9\n",
])
def test_lines_left_alone(line):
    assert rewrite_line(line) == line


def test_transform_is_idempotent():
    once = transform_dockerfile(DOCKERFILE)
    twice = transform_dockerfile(once.content)
    assert twice.content == once.content
    assert twice.rewritten_lines == 0
    assert not twice.changed


def test_no_match_is_not_an_error():
    content = "FROM registry.access.redhat.com/ubi9/ubi:latest\nRUN true"
    result = transform_dockerfile(content)
    assert result.content == content
    assert result.rewritten_lines == 0


def test_rules_are_named():
    assert [rule.name for rule in BASE_IMAGE_RULES] == ["base-rhel9", "base-rhel8"]


@pytest.mark.parametrize("separator", ["\x0c", "\x0b", "\x1c", "\x85", " "])
def test_only_newlines_split_lines(separator):
    content = f"RUN echo {separator}FROM host/ocp/4.16:base-rhel9\nFROM host/ocp/4.16:base-rhel9\n"
    result = transform_dockerfile(content)
    assert result.rewritten_lines == 1
    assert result.content == f"RUN echo {separator}FROM host/ocp/4.16:base-rhel9\nFROM host/origin/scos-4.16:base-stream9\n"
