"""Helpers for loading locally built container images into cluster nodes."""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Sequence, Tuple

from kindtool.errors import errorf
from kindtool.runner import command, output_lines

ImageTagFetcher = Callable[[Any, str], Mapping[str, bool]]

_DEFAULT_DOMAIN = "docker.io/"
_OFFICIAL_REPO_NAME = "library"


def remove_duplicates(items: Iterable[str]) -> List[str]:
    """Return ``items`` without repeats, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))


def sanitize_image(image: str) -> str:
    """Return the fully qualified form of an image reference.

    Adds the ``library`` repository, the ``docker.io`` domain and the
    ``latest`` tag where the reference leaves them out.
    """
    name = image
    if "/" not in image:
        name = f"{_OFFICIAL_REPO_NAME}/{image}"
    domain = name.split("/", 1)[0]
    if not any(c in domain for c in ".:") and domain != "localhost":
        name = _DEFAULT_DOMAIN + name
    if ":" not in name:
        name += ":latest"
    return name


def check_if_image_retag_required(
    node: Any,
    image_id: str,
    image_name: str,
    tag_fetcher: ImageTagFetcher,
) -> Tuple[bool, bool, str]:
    """Look up the tags of ``image_id`` on ``node``.

    Returns ``(exists, retag_required, sanitized_image)``: whether the image
    is on the node at all, whether it lacks the tag ``image_name``, and the
    sanitized name. A failing lookup counts as the image being absent.
    """
    try:
        tags = tag_fetcher(node, image_id)
    except Exception:  # noqa: BLE001 - any lookup failure means "not present"
        return False, False, ""
    if not tags:
        return False, False, ""
    sanitized = sanitize_image(image_name)
    return True, not tags.get(sanitized, False), sanitized


def image_id(name: str) -> str:
    """Return the ID of the local image ``name`` as reported by docker."""
    cmd = command("docker", "image", "inspect", "-f", "{{ .Id }}", name)
    lines = output_lines(cmd)
    if len(lines) != 1:
        raise errorf("Docker image ID should only be one line, got %d lines", len(lines))
    return lines[0]


def save(images: Sequence[str], dest: str) -> None:
    """Save ``images`` into the archive ``dest``, as ``docker save`` does."""
    command("docker", "save", "-o", dest, *images).run()