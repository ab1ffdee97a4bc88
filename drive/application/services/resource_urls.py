"""URL building for resources."""


class ResourceUrlBuilder:
    """Builds the canonical (authenticated) and public URLs of a resource.

    Webhook payloads always carry the canonical URL so they are valid for
    private buckets as well.
    """

    def __init__(self, base_url: str = "", api_prefix: str = "/api/v1") -> None:
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""

    def resource_url(self, bucket_id: str, filename: str) -> str:
        """Authenticated download URL: {base}/api/v1/resources/{bucket}/{digest}{ext}."""
        return f"{self.base_url}{self.api_prefix}/resources/{bucket_id}/{filename}"

    def public_url(self, bucket_id: str, filename: str) -> str:
        """Anonymous download URL (public buckets only): {base}/public/{bucket}/{digest}{ext}."""
        return f"{self.base_url}/public/{bucket_id}/{filename}"
