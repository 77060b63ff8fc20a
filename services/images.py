import logging
import re
from typing import Any, Optional

from google.cloud import storage

import config

logger = logging.getLogger('uvicorn.error')

# Asset ids look like "image-<hash>-<width>x<height>-<ext>"
IMAGE_ASSET_REF = re.compile(r"^image-(?P<hash>[A-Za-z0-9]+)-(?P<size>\d+x\d+)-(?P<ext>[a-z0-9]+)$")


def image_ref_to_blob_name(image_ref: Any) -> Optional[str]:
    """
    Resolves an opaque image reference to the object name it is stored under.

    Accepts either a bare reference string or an image field of the form
    ``{"asset": {"_ref": "image-..."}}``. Anything that is not an asset id is
    taken to already be an object path.
    """
    if isinstance(image_ref, dict):
        image_ref = (image_ref.get("asset") or {}).get("_ref")
    if not image_ref or not isinstance(image_ref, str):
        return None

    match = IMAGE_ASSET_REF.match(image_ref)
    if match:
        return f"images/{match['hash']}-{match['size']}.{match['ext']}"
    return image_ref.lstrip("/")


def image_url(
    gcs_client: Optional[storage.Client],
    image_ref: Any,
    bucket_name: str = config.IMAGES_BUCKET_NAME,
) -> Optional[str]:
    if gcs_client is None:
        return None
    blob_name = image_ref_to_blob_name(image_ref)
    if blob_name is None:
        return None
    try:
        return gcs_client.bucket(bucket_name).blob(blob_name).public_url
    except Exception as e:
        logger.error(f"Could not build public URL for image '{blob_name}': {e}")
        return None
