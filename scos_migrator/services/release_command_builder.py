from scos_migrator.models import MergeResult, ReleaseCommand


def build_release_command(merge: MergeResult, base_release: str, output_image: str) -> ReleaseCommand:
    return ReleaseCommand(
        from_release=base_release,
        to_image=output_image,
        to_image_base=merge.override_base_image,
        mappings=[f"{name}={image}" for name, image in merge.final_mapping.items()],
        keep_manifest_list=True,
        allow_missing_images=True,
    )
