"""Shopify Admin API client — articles, metafields and image uploads.

Articles go through the REST API; image uploads use the GraphQL staged
upload flow (stagedUploadsCreate -> multipart POST -> fileCreate).

Usage:
    from src.blog_engine.publisher.shopify_client import ShopifyClient

    with ShopifyClient() as client:
        blog_id = client.get_blog_id()
        article_id = client.publish_article(blog_id, ArticleInput(...))

The client is constructed explicitly and passed to whoever needs it;
there is no module-level instance.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Any, Optional

import requests

from src.common.config import ShopifySettings, settings
from src.common.logging import setup_logging

from .models import ArticleInput

logger = setup_logging(module_name="publisher.shopify_client")

DEFAULT_AUTHOR = "Blog Generator"

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

STAGED_UPLOADS_MUTATION = """
mutation StagedUploadsCreate($input: [StagedUploadInput!]!) {
  stagedUploadsCreate(input: $input) {
    stagedTargets {
      url
      resourceUrl
      parameters { name value }
    }
    userErrors { field message }
  }
}
"""

FILE_CREATE_MUTATION = """
mutation fileCreate($files: [FileCreateInput!]!) {
  fileCreate(files: $files) {
    files {
      id
      fileStatus
      alt
      preview { image { url } status }
    }
    userErrors { message }
  }
}
"""

FILE_POLL_QUERY = """
query getFile($id: ID!) {
  node(id: $id) {
    ... on MediaImage {
      fileStatus
      preview { image { url } status }
    }
    ... on GenericFile {
      fileStatus
      preview { image { url } status }
    }
  }
}
"""


class ShopifyClient:
    """Thin wrapper over the Shopify Admin REST and GraphQL APIs."""

    def __init__(
        self,
        config: ShopifySettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or settings.shopify
        self._session = session or requests.Session()

    # --- Request helpers ---

    def _validate_credentials(self) -> None:
        if not self.config.is_configured:
            raise ValueError(
                "Shopify credentials not configured. Please set SHOPIFY_SHOP and "
                "SHOPIFY_ADMIN_ACCESS_TOKEN environment variables."
            )

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}/{path}"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.config.access_token,
        }

    def _request(self, method: str, path: str, payload: dict | None = None) -> requests.Response:
        self._validate_credentials()
        return self._session.request(
            method,
            self._url(path),
            json=payload,
            headers=self._headers(),
            timeout=self.config.request_timeout,
        )

    def _graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict:
        resp = self._request("POST", "graphql.json", {"query": query, "variables": variables})
        if not resp.ok:
            raise RuntimeError(f"Shopify API error: {resp.status_code} {resp.reason}")
        return resp.json()

    # --- Articles ---

    def publish_article(self, blog_id: str, article: ArticleInput) -> str:
        """Create an article on a blog.

        Args:
            blog_id: Target blog ID
            article: Article payload

        Returns:
            ID of the created article

        Raises:
            RuntimeError: If Shopify rejects the article
        """
        payload: dict[str, Any] = {
            "title": article.title,
            "body_html": article.body_html,
            "author": article.author or DEFAULT_AUTHOR,
            "published_at": article.published_at or datetime.now(timezone.utc).isoformat(),
            "tags": ",".join(article.tags),
        }
        if article.handle:
            payload["handle"] = article.handle
        if article.image_src:
            payload["image"] = {"src": article.image_src}

        resp = self._request("POST", f"blogs/{blog_id}/articles.json", {"article": payload})
        if not resp.ok:
            raise RuntimeError(f"Failed to publish article: {resp.text}")

        article_id = str(resp.json()["article"]["id"])
        logger.info("Published article %s to blog %s", article_id, blog_id)
        return article_id

    def update_article(
        self,
        blog_id: str,
        article_id: str,
        title: Optional[str] = None,
        body_html: Optional[str] = None,
        author: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> str:
        """Update fields of an existing article. Only given fields are sent."""
        update: dict[str, Any] = {}
        if title:
            update["title"] = title
        if body_html:
            update["body_html"] = body_html
        if author:
            update["author"] = author
        if tags is not None:
            update["tags"] = ",".join(tags)

        resp = self._request(
            "PUT", f"blogs/{blog_id}/articles/{article_id}.json", {"article": update}
        )
        if not resp.ok:
            raise RuntimeError(f"Failed to update article: {resp.text}")
        return str(resp.json()["article"]["id"])

    def update_article_metafield(
        self,
        blog_id: str,
        article_id: str,
        namespace: str,
        key: str,
        value: str,
        value_type: str = "json",
    ) -> str:
        """Create or update a metafield on an article.

        Returns:
            ID of the metafield
        """
        payload = {
            "metafield": {
                "namespace": namespace,
                "key": key,
                "value": value,
                "type": value_type,
            }
        }
        resp = self._request(
            "POST", f"blogs/{blog_id}/articles/{article_id}/metafields.json", payload
        )
        if not resp.ok:
            raise RuntimeError(f"Failed to update metafield {namespace}.{key}: {resp.text}")
        return str(resp.json()["metafield"]["id"])

    def get_blog_id(self) -> str:
        """Return the configured blog ID, or the first blog in the shop."""
        if self.config.blog_id:
            return self.config.blog_id

        resp = self._request("GET", "blogs.json")
        if not resp.ok:
            raise RuntimeError("Failed to fetch blogs from Shopify")

        blogs = resp.json().get("blogs", [])
        if not blogs:
            raise RuntimeError("No blogs found in this Shopify store")
        return str(blogs[0]["id"])

    def validate_connection(self) -> bool:
        """Check that the shop is reachable with the configured token."""
        try:
            resp = self._request("GET", "shop.json")
        except requests.RequestException as e:
            logger.warning("Shopify connection check failed: %s", e)
            return False
        return resp.ok

    # --- Files ---

    @staticmethod
    def get_mime_type(filename: str) -> str:
        """Guess an image MIME type from the filename extension."""
        ext = PurePath(filename).suffix.lstrip(".").lower() or "jpg"
        return MIME_TYPES.get(ext, "image/jpeg")

    def upload_image(self, data: bytes, filename: str, alt_text: Optional[str] = None) -> str:
        """Upload an image to Shopify Files and return its public URL.

        Args:
            data: Raw image bytes
            filename: Original filename (used for the MIME type)
            alt_text: Alt text stored with the file (defaults to filename)

        Returns:
            Image URL (preview URL once processed, else the staged resource URL)

        Raises:
            RuntimeError: If any step of the upload fails
        """
        try:
            return self._upload_image(data, filename, alt_text or filename)
        except (requests.RequestException, KeyError) as e:
            raise RuntimeError(f"Image upload failed: {e}") from e

    def _upload_image(self, data: bytes, filename: str, alt_text: str) -> str:
        mime_type = self.get_mime_type(filename)

        # Step 1: signed upload target
        staged = self._graphql(
            STAGED_UPLOADS_MUTATION,
            {
                "input": [
                    {
                        "resource": "FILE",
                        "filename": filename,
                        "mimeType": mime_type,
                        "httpMethod": "POST",
                    }
                ]
            },
        )
        targets = ((staged.get("data") or {}).get("stagedUploadsCreate") or {}).get(
            "stagedTargets"
        ) or []
        if staged.get("errors") or not targets:
            message = (staged.get("errors") or [{}])[0].get("message", "Unknown error")
            raise RuntimeError(f"Image upload failed: could not get upload URL: {message}")

        target = targets[0]
        resource_url = target["resourceUrl"]

        # Step 2: multipart upload to the signed URL
        form = {param["name"]: param["value"] for param in target.get("parameters") or []}
        upload_resp = self._session.post(
            target["url"],
            data=form,
            files={"file": (filename, data, mime_type)},
            timeout=self.config.request_timeout,
        )
        if not upload_resp.ok:
            raise RuntimeError(f"Image upload failed: {upload_resp.status_code} {upload_resp.reason}")
        logger.info("File uploaded to staging URL: %s", resource_url)

        # Step 3: register the file
        created = self._graphql(
            FILE_CREATE_MUTATION,
            {
                "files": [
                    {
                        "alt": alt_text,
                        "contentType": "IMAGE",
                        "originalSource": resource_url,
                    }
                ]
            },
        )
        if created.get("errors"):
            messages = "; ".join(e.get("message", "") for e in created["errors"])
            raise RuntimeError(f"Image upload failed: fileCreate failed: {messages}")

        files = ((created.get("data") or {}).get("fileCreate") or {}).get("files") or []
        if not files:
            raise RuntimeError("Image upload failed: fileCreate returned no files")

        created_file = files[0]
        image_url = _preview_url(created_file)

        # Step 4: wait for Shopify to process the file
        if not image_url and created_file.get("fileStatus") == "UPLOADED":
            image_url = self._poll_image_url(created_file["id"])

        if not image_url:
            logger.warning("Preview URL not available, using staged resource URL")
            image_url = resource_url

        logger.info("Uploaded image %s -> %s", filename, image_url)
        return image_url

    def _poll_image_url(self, file_id: str) -> str:
        for attempt in range(self.config.upload_poll_attempts):
            time.sleep(self.config.upload_poll_interval_seconds)

            node = (self._graphql(FILE_POLL_QUERY, {"id": file_id}).get("data") or {}).get("node")
            if not node:
                break

            url = _preview_url(node)
            if url:
                return url

            status = node.get("fileStatus") or (node.get("preview") or {}).get("status")
            if status == "READY":
                break
            logger.info(
                "Poll attempt %d/%d: file status is %s",
                attempt + 1,
                self.config.upload_poll_attempts,
                status,
            )
        return ""

    # --- Lifecycle ---

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> ShopifyClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def _preview_url(file_node: dict) -> str:
    preview = file_node.get("preview") or {}
    image = preview.get("image") or {}
    return image.get("url") or ""
