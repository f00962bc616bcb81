import mimetypes
import os
from datetime import datetime

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

import const
from app.lib.logger import logger
from app.lib.string import make_id

DOWNLOAD_TIMEOUT = 30


def is_remote(path):
    return path.startswith("http://") or path.startswith("https://")


def read_source(path_or_url):
    """Return (content, content_type) for a URL or a local file path."""
    if is_remote(path_or_url):
        response = requests.get(path_or_url, timeout=DOWNLOAD_TIMEOUT)
        response.raise_for_status()
        content_type = response.headers.get("Content-Type", "").split(";")[0].strip()
        if not content_type:
            content_type, _ = mimetypes.guess_type(path_or_url.split("?")[0])
        return response.content, content_type or "application/octet-stream"

    if not os.path.exists(path_or_url):
        logger.warning(f"File not found: {path_or_url}")
        raise FileNotFoundError(path_or_url)

    with open(path_or_url, "rb") as f:
        content = f.read()
    content_type, _ = mimetypes.guess_type(path_or_url)
    return content, content_type or "application/octet-stream"


def build_file_name(content_type):
    extension = mimetypes.guess_extension(content_type) or ""
    return f"{make_id(const.UPLOAD_NAME_LENGTH)}{extension}"


class LocalStorage:
    def __init__(self, upload_directory, frontend_url):
        self.upload_directory = upload_directory
        self.frontend_url = frontend_url.rstrip("/")

    def upload_simple(self, path_or_url):
        content, content_type = read_source(path_or_url)

        today = datetime.utcnow()
        parts = [today.strftime("%Y"), today.strftime("%m"), today.strftime("%d")]
        folder = os.path.join(self.upload_directory, *parts)
        os.makedirs(folder, exist_ok=True)

        file_name = build_file_name(content_type)
        with open(os.path.join(folder, file_name), "wb") as f:
            f.write(content)

        url = f"{self.frontend_url}/uploads/{'/'.join(parts)}/{file_name}"
        logger.info(f"Stored {path_or_url} as {url}")
        return url


class CloudflareStorage:
    def __init__(
        self,
        account_id,
        access_key,
        secret_access_key,
        bucket_name,
        bucket_url,
        region="auto",
    ):
        self.bucket_name = bucket_name
        self.bucket_url = bucket_url.rstrip("/")
        self._client = boto3.client(
            "s3",
            endpoint_url=f"https://{account_id}.r2.cloudflarestorage.com",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_access_key,
            region_name=region,
        )

    def upload_simple(self, path_or_url):
        content, content_type = read_source(path_or_url)
        file_name = build_file_name(content_type)

        try:
            self._client.put_object(
                Bucket=self.bucket_name,
                Key=file_name,
                Body=content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading to R2: {e}")
            raise

        url = f"{self.bucket_url}/{file_name}"
        logger.info(f"Uploaded {path_or_url} as {url}")
        return url


def create_storage(config):
    provider = config.get("STORAGE_PROVIDER") or "local"
    if provider == "cloudflare":
        return CloudflareStorage(
            account_id=config["CLOUDFLARE_ACCOUNT_ID"],
            access_key=config["CLOUDFLARE_ACCESS_KEY"],
            secret_access_key=config["CLOUDFLARE_SECRET_ACCESS_KEY"],
            bucket_name=config["CLOUDFLARE_BUCKETNAME"],
            bucket_url=config["CLOUDFLARE_BUCKET_URL"],
            region=config.get("CLOUDFLARE_REGION") or "auto",
        )
    if provider == "local":
        return LocalStorage(config["UPLOAD_DIRECTORY"], config["FRONTEND_URL"])
    raise ValueError(f"Unknown storage provider: {provider}")
