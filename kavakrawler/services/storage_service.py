"""
Photo storage on Cloudflare R2 (S3-compatible, via boto3).

Used for bar photos and for the photo URLs attached to reviews and check-ins.
"""

import logging
import os
import uuid
from datetime import datetime
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'webp'}


def allowed_file(filename):
    ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    return ext in ALLOWED_EXTENSIONS


class StorageService:
    def __init__(self):
        self.s3_client = None
        self.bucket_name = os.environ.get('R2_BUCKET_NAME')
        self.account_id = os.environ.get('R2_ACCOUNT_ID')
        self.access_key = os.environ.get('R2_ACCESS_KEY_ID')
        self.secret_key = os.environ.get('R2_SECRET_ACCESS_KEY')
        self.public_domain = os.environ.get('R2_PUBLIC_DOMAIN')

        if all([self.bucket_name, self.account_id, self.access_key, self.secret_key]):
            try:
                self.s3_client = boto3.client(
                    's3',
                    endpoint_url=f'https://{self.account_id}.r2.cloudflarestorage.com',
                    aws_access_key_id=self.access_key,
                    aws_secret_access_key=self.secret_key,
                    region_name='auto'
                )
            except (BotoCoreError, ValueError) as e:
                logger.error(f"Failed to initialize R2 client: {e}")

    def is_configured(self):
        return self.s3_client is not None

    def _key_from_url(self, file_url):
        key = file_url
        if self.public_domain and file_url.startswith(self.public_domain):
            key = file_url.replace(f"{self.public_domain.rstrip('/')}/", "")
        if key.startswith('http'):
            key = urlparse(key).path.lstrip('/')
        return key

    def upload_file(self, file_obj, folder='bar_photos'):
        """
        Upload a file-like object (werkzeug FileStorage) to R2.

        Returns the public URL, the object key if no public domain is set, or
        None on failure.
        """
        if not self.s3_client:
            logger.error("R2 client not initialized. Check environment variables.")
            return None

        # Generate a unique filename
        original_filename = secure_filename(file_obj.filename)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        unique_id = str(uuid.uuid4())[:8]
        extension = os.path.splitext(original_filename)[1]
        key = f"{folder}/{timestamp}_{unique_id}{extension}"

        try:
            file_obj.seek(0)
            self.s3_client.upload_fileobj(
                file_obj,
                self.bucket_name,
                key,
                ExtraArgs={'ContentType': file_obj.content_type}
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading file to R2: {e}")
            return None

        if self.public_domain:
            return f"{self.public_domain.rstrip('/')}/{key}"
        return key

    def delete_file(self, file_url):
        """Delete a file from R2 given its URL or key."""
        if not self.s3_client:
            logger.error("R2 client not initialized.")
            return False

        try:
            self.s3_client.delete_object(
                Bucket=self.bucket_name,
                Key=self._key_from_url(file_url)
            )
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error deleting file from R2: {e}")
            return False


storage_service = StorageService()
