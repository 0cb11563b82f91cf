import re
from dataclasses import dataclass


@dataclass(frozen=True)
class RewriteRule:
    name: str
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, line: str) -> str | None:
        if not self.pattern.fullmatch(line):
            return None
        return self.pattern.sub(self.replacement, line, count=1)


def _base_image_rule(rhel: int, stream: int) -> RewriteRule:
    pattern = re.compile(
        r"(?P<prefix>FROM[ \t]+)(?P<host>[^/\s]+)/ocp/(?P<version>[^:/\s]+)"
        rf":base-rhel{rhel}(?P<suffix>(?:[ \t]+[Aa][Ss][ \t]+\S+)?[ \t]*)"
    )
    replacement = rf"\g<prefix>\g<host>/origin/scos-\g<version>:base-stream{stream}\g<suffix>"
    return RewriteRule(name=f"base-rhel{rhel}", pattern=pattern, replacement=replacement)


# only the OCP base images are swapped; builder images sharing the host stay untouched
BASE_IMAGE_RULES: tuple[RewriteRule, ...] = (
    _base_image_rule(9, 9),
    _base_image_rule(8, 8),
)


@dataclass(frozen=True)
class TransformResult:
    content: str
    rewritten_lines: int

    @property
    def changed(self) -> bool:
        return self.rewritten_lines > 0


def rewrite_line(line: str, rules: tuple[RewriteRule, ...] = BASE_IMAGE_RULES) -> str:
    body = line.rstrip("\r\n")
    ending = line[len(body):]
    for rule in rules:
        rewritten = rule.apply(body)
        if rewritten is not None:
            return rewritten + ending
    return line


def transform_dockerfile(content: str, rules: tuple[RewriteRule, ...] = BASE_IMAGE_RULES) -> TransformResult:
    lines = []
    rewritten = 0
    # lines end at "\n" only
    for line in (part for part in re.split(r"(?<=\n)", content) if part):
        new_line = rewrite_line(line, rules)
        if new_line != line:
            rewritten += 1
        lines.append(new_line)
    return TransformResult(content="".join(lines), rewritten_lines=rewritten)
