# -*- coding: utf-8 -*-
"""
URL extraction from the upload service's answers.

The upload endpoint has answered with several shapes over time; the editor
needs a single URL out of them.
"""

from typing import Any

from cbt_admin.utils.exceptions import UploadError

_URL_KEYS = ("url", "file_url", "location")

URL_NOT_FOUND_MESSAGE = "Upload berhasil tapi URL tidak ditemukan di response API."


def find_upload_url(response: Any) -> str:
    """
    Look for a URL in an upload response.

    Checked in order: a bare string starting with ``http`` or ``/``,
    ``{data: str}``, ``{url}``, ``{file_url}``, ``{location}`` and
    ``{data: {url | file_url | location}}``.

    Returns:
        str: The URL, or ``""`` when no shape matched
    """
    if isinstance(response, str):
        if response.startswith("http") or response.startswith("/"):
            return response
        return ""

    if not isinstance(response, dict):
        return ""

    data = response.get("data")
    if isinstance(data, str):
        return data

    for key in _URL_KEYS:
        if isinstance(response.get(key), str):
            return response[key]

    if isinstance(data, dict):
        for key in _URL_KEYS:
            if isinstance(data.get(key), str):
                return data[key]

    return ""


def extract_upload_url(response: Any) -> str:
    """
    Same as :func:`find_upload_url` but fails when nothing matched.

    Raises:
        UploadError: No supported shape carried a URL
    """
    url = find_upload_url(response)
    if not url:
        raise UploadError(URL_NOT_FOUND_MESSAGE)
    return url
