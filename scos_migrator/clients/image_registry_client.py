import os
import re
import logging

import requests

from scos_migrator.models import ImageInfo

logger = logging.getLogger(__name__)

MANIFEST_MEDIA_TYPES = [
    "application/vnd.docker.distribution.manifest.list.v2+json",
    "application/vnd.oci.image.index.v1+json",
    "application/vnd.docker.distribution.manifest.v2+json",
    "application/vnd.oci.image.manifest.v1+json",
]
DEFAULT_PLATFORM = {"os": "linux", "architecture": "amd64"}


class RegistryError(RuntimeError):
    pass


def parse_image_reference(image: str) -> tuple[str, str, str]:
    """Split ``host/path[:tag|@digest]`` into host, repository path and reference."""
    if "@" in image:
        name, reference = image.split("@", 1)
    else:
        name, reference = image, "latest"
        last = name.rsplit("/", 1)[-1]
        if ":" in last:
            name, reference = name.rsplit(":", 1)
    host, _, path = name.partition("/")
    if not host or not path or not reference:
        raise RegistryError(f"Invalid image reference {image}")
    return host, path, reference


class ImageRegistryClient:
    def __init__(self, timeout: int = 30, scheme: str = "https"):
        self.timeout: int = timeout
        self.scheme: str = scheme
        self.credentials: tuple[str, str] | None = None
        username = os.getenv("REGISTRY_USERNAME")
        password = os.getenv("REGISTRY_PASSWORD")
        if username and password:
            self.credentials = (username, password)
        self._tokens: dict[tuple[str, str], str] = {}

    def inspect(self, image: str) -> ImageInfo:
        host, path, reference = parse_image_reference(image)
        response = self._fetch_manifest(host, path, reference)
        digest = response.headers.get("Docker-Content-Digest")
        manifest = self._json(response, image)

        if "manifests" in manifest:
            entry = self._select_platform(manifest["manifests"], image)
            manifest = self._json(self._fetch_manifest(host, path, entry["digest"]), image)

        config_digest = manifest.get("config", {}).get("digest")
        if not config_digest:
            raise RegistryError(f"Manifest of {image} has no config blob")
        config = self._json(self._get(host, path, f"blobs/{config_digest}"), image)
        labels = config.get("config", {}).get("Labels") or {}
        return ImageInfo(digest=digest, labels=dict(labels))

    def resolve_digest(self, image: str) -> str | None:
        try:
            host, path, reference = parse_image_reference(image)
            response = self._fetch_manifest(host, path, reference)
        except RegistryError as e:
            logger.error(f"Error resolving digest for {image}: {e}")
            return None
        digest = response.headers.get("Docker-Content-Digest")
        if not digest:
            logger.warning(f"No digest found in headers for {image}")
        return digest

    def _fetch_manifest(self, host: str, path: str, reference: str) -> requests.Response:
        headers = {"Accept": ", ".join(MANIFEST_MEDIA_TYPES)}
        return self._get(host, path, f"manifests/{reference}", headers)

    def _get(self, host: str, path: str, resource: str, headers: dict[str, str] | None = None) -> requests.Response:
        url = f"{self.scheme}://{host}/v2/{path}/{resource}"
        headers = dict(headers or {})
        token = self._tokens.get((host, path))
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = requests.get(url=url, headers=headers, timeout=self.timeout)
            if response.status_code == 401 and not token:
                token = self._authenticate(host, path, response.headers.get("WWW-Authenticate", ""))
                headers["Authorization"] = f"Bearer {token}"
                response = requests.get(url=url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise RegistryError(f"Error requesting {url}: {e}") from e
        if response.status_code != 200:
            raise RegistryError(f"Request to {url} failed with status code {response.status_code}")
        return response

    def _authenticate(self, host: str, path: str, challenge: str) -> str:
        if not challenge.lower().startswith("bearer "):
            raise RegistryError(f"Unsupported authentication challenge from {host}: {challenge or 'none'}")
        params = dict(re.findall(r'(\w+)="([^"]*)"', challenge))
        realm = params.pop("realm", None)
        if not realm:
            raise RegistryError(f"Authentication challenge from {host} has no realm")
        params.setdefault("scope", f"repository:{path}:pull")
        try:
            response = requests.get(realm, params=params, auth=self.credentials, timeout=self.timeout)
        except requests.RequestException as e:
            raise RegistryError(f"Error requesting token from {realm}: {e}") from e
        if response.status_code != 200:
            raise RegistryError(f"Token request to {realm} failed with status code {response.status_code}")
        body = response.json()
        token = body.get("token") or body.get("access_token")
        if not token:
            raise RegistryError(f"No token returned by {realm}")
        self._tokens[(host, path)] = token
        return token

    def _select_platform(self, manifests: list[dict], image: str) -> dict:
        for entry in manifests:
            platform = entry.get("platform", {})
            if all(platform.get(k) == v for k, v in DEFAULT_PLATFORM.items()):
                return entry
        if not manifests:
            raise RegistryError(f"Manifest list of {image} is empty")
        logger.warning(f"No linux/amd64 manifest for {image}, using the first entry")
        return manifests[0]

    @staticmethod
    def _json(response: requests.Response, image: str) -> dict:
        try:
            return response.json()
        except ValueError as e:
            raise RegistryError(f"Invalid JSON returned for {image}: {e}") from e
