"""Blog Catalog API client.

This module defines a small client wrapper around the REST API served by
``blog_catalog_api``.  It uses the ``requests`` library internally and
exposes high-level methods for the public operations:

* :meth:`login` – exchange credentials for a bearer token.
* :meth:`register_user` / :meth:`list_users` – manage accounts.
* :meth:`list_blogs`, :meth:`get_blog`, :meth:`create_blog`,
  :meth:`update_blog`, :meth:`like_blog`, :meth:`delete_blog` – manage blogs.
* :meth:`get_statistics` – fetch catalogue statistics.

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary with
``status_code`` and ``message`` taken from the API's ``{"error": ...}``
body.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class BlogCatalogClient:
    """Client for interacting with the Blog Catalog API.

    After a successful :meth:`login` the returned token is stored on the
    client and sent as ``Authorization: Bearer <token>`` with every
    subsequent request.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        api_prefix: str = "/api/v1",
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:3003``.
            token: Optional bearer token from a previous login.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            api_prefix: Path prefix of the versioned API.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/") + api_prefix
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the API prefix (e.g. ``/blogs/``).
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.  ``data`` is the parsed JSON body,
            or ``None`` for empty responses such as 204.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    message = exc.response.json().get("error", "")
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def login(self, username: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Log in and remember the issued token.

        Returns:
            A tuple ``(login, error)`` where ``login`` holds ``token``,
            ``username`` and ``name``.
        """
        data, error = self._request("POST", "/login", json_body={"username": username, "password": password})
        if error:
            return None, error
        self.token = data["token"]
        return data, None

    def logout(self) -> None:
        """Forget the stored token.  Tokens expire on their own after an hour."""
        self.token = None

    def register_user(
        self, username: str, password: str, name: Optional[str] = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request(
            "POST", "/users/", json_body={"username": username, "name": name, "password": password}
        )

    def list_users(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/users/")
        return (data or []), error

    # ------------------------------------------------------------------
    # Blogs
    # ------------------------------------------------------------------
    def list_blogs(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all blogs.

        Returns:
            A tuple ``(blogs, error)``.  ``blogs`` is empty on failure.
        """
        data, error = self._request("GET", "/blogs/")
        return (data or []), error

    def get_blog(self, blog_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/blogs/{blog_id}")

    def create_blog(
        self, title: str, url: str, author: Optional[str] = None, likes: Optional[int] = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a blog as the logged in user.

        ``likes`` is omitted from the request when not given, so the
        server applies its default of 0.
        """
        payload: Dict[str, Any] = {"title": title, "url": url, "author": author}
        if likes is not None:
            payload["likes"] = likes
        return self._request("POST", "/blogs/", json_body=payload)

    def update_blog(self, blog_id: Any, changes: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/blogs/{blog_id}", json_body=changes)

    def like_blog(self, blog: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Increment the likes of ``blog`` (a blog as returned by the API)."""
        return self.update_blog(blog["id"], {"likes": blog.get("likes", 0) + 1})

    def delete_blog(self, blog_id: Any) -> Tuple[bool, Optional[Error]]:
        """Delete a blog owned by the logged in user.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error = self._request("DELETE", f"/blogs/{blog_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    def get_statistics(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/statistics/")
