# warehub/shared/services/cloudinary_service.py
import re
import uuid
import logging
from datetime import datetime
from typing import Optional

import cloudinary
import cloudinary.uploader
from fastapi import UploadFile

from warehub.config.settings import settings
from warehub.core.exceptions import InvalidInput, internal_error

logger = logging.getLogger(__name__)

class CloudinaryService:
    """Image storage for warehouse cover photos"""

    def __init__(self):
        try:
            if not all([settings.cloudinary_cloud_name, settings.cloudinary_api_key, settings.cloudinary_api_secret]):
                logger.warning("⚠️ Cloudinary is not fully configured")
                self.configured = False
                return

            cloudinary.config(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
                secure=True
            )

            self.configured = True

        except Exception as e:
            logger.error(f"❌ Error configuring Cloudinary: {e}")
            self.configured = False

    async def upload_warehouse_image(self, image_file: UploadFile, warehouse_id: int, user_id: int) -> str:
        """
        Upload a warehouse cover image

        Returns:
            str: secure URL of the uploaded image

        Raises:
            InvalidInput: not an image, or too large
        """
        if not self.configured:
            logger.error("❌ Upload attempted without Cloudinary credentials")
            raise internal_error()

        if not image_file.content_type or image_file.content_type not in settings.allowed_image_formats:
            raise InvalidInput("File must be a JPEG, PNG or WEBP image")

        await image_file.seek(0)
        file_content = await image_file.read()

        if len(file_content) > settings.max_image_size:
            raise InvalidInput(f"Image must not exceed {settings.max_image_size // (1024*1024)}MB")

        file_id = str(uuid.uuid4())[:8]
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        public_id = f"warehouse_{warehouse_id}_{timestamp}_{file_id}"

        try:
            logger.info(f"📤 Uploading image: {public_id}")

            result = cloudinary.uploader.upload(
                file_content,
                public_id=public_id,
                folder=f"{settings.cloudinary_folder}/warehouses",
                transformation=[
                    {
                        "width": 1200,
                        "height": 600,
                        "crop": "fit",
                        "quality": "auto:good",
                        "format": "auto"
                    }
                ],
                tags=["warehouse_cover", f"warehouse_{warehouse_id}", f"user_{user_id}"],
                resource_type="image",
                overwrite=False,
                unique_filename=True,
                use_filename=False
            )

            if 'secure_url' not in result:
                raise RuntimeError("Cloudinary returned no secure_url")

            logger.info(f"✅ Image uploaded: {result['secure_url']}")
            return result["secure_url"]

        except Exception:
            logger.exception("❌ Error uploading image to Cloudinary")
            raise internal_error()

    async def delete_image(self, image_url: str) -> bool:
        """Delete a previously uploaded image; False when it is not ours or fails"""
        if not self.configured:
            return False

        public_id = self._extract_public_id_from_url(image_url)
        if not public_id:
            return False

        try:
            result = cloudinary.uploader.destroy(public_id)
            success = result.get("result") == "ok"
            if not success:
                logger.warning(f"⚠️ Could not delete image: {public_id} - {result}")
            return success
        except Exception as e:
            logger.error(f"❌ Error deleting image: {str(e)}")
            return False

    def _extract_public_id_from_url(self, image_url: Optional[str]) -> Optional[str]:
        """
        https://res.cloudinary.com/<cloud>/image/upload/[transformations/]v<version>/<public_id>.<format>
        """
        if not image_url or "cloudinary.com" not in image_url:
            return None

        parts = image_url.split("/")
        if "upload" not in parts:
            return None

        filtered_parts = []
        for part in parts[parts.index("upload") + 1:]:
            # transformations
            if re.match(r'^(c|w|h|q|f)_', part):
                continue
            # version
            if part.startswith("v") and part[1:].isdigit():
                continue
            filtered_parts.append(part)

        if not filtered_parts:
            return None

        public_id = "/".join(filtered_parts)
        if "." in filtered_parts[-1]:
            public_id = public_id.rsplit(".", 1)[0]
        return public_id


def get_image_storage() -> CloudinaryService:
    return CloudinaryService()
