from dataclasses import field

from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class MergeResult:
    final_mapping: dict[str, str]
    override_base_image: str | None = None


@dataclass(frozen=True)
class ReleaseCommand:
    from_release: str
    to_image: str
    mappings: list[str] = field(default_factory=list)
    to_image_base: str | None = None
    keep_manifest_list: bool = True
    allow_missing_images: bool = True

    def argv(self) -> list[str]:
        args = [
            "oc", "adm", "release", "new",
            f"--from-release={self.from_release}",
            f"--to-image={self.to_image}",
        ]
        if self.to_image_base:
            args.append(f"--to-image-base={self.to_image_base}")
        if self.keep_manifest_list:
            args.append("--keep-manifest-list")
        if self.allow_missing_images:
            args.append("--allow-missing-images")
        return args + list(self.mappings)

    def to_dict(self) -> dict:
        return {
            "from_release": self.from_release,
            "to_image": self.to_image,
            "to_image_base": self.to_image_base,
            "keep_manifest_list": self.keep_manifest_list,
            "allow_missing_images": self.allow_missing_images,
            "mappings": list(self.mappings),
            "argv": self.argv(),
        }
