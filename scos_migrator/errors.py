class MigrationError(Exception):
    """Run-level condition that stops the migration."""


class InvalidManifest(MigrationError, ValueError):
    pass


class NoSuccessfulBuilds(MigrationError):
    code = "no_successful_builds"

    def __init__(self, total: int):
        super().__init__(f"None of the {total} components were rebuilt, refusing to compose a release")
        self.total = total


class MigrationAborted(MigrationError):
    pass
