"""Upload router - relays files to object storage and returns their URLs"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from ...auth import Principal, get_current_principal, get_optional_principal
from ...config import MAX_UPLOAD_FILES, MAX_UPLOAD_SIZE_MB
from ...errors import ValidationError
from ...policy import Action, authorize
from ...storage import UploadRelay, get_upload_relay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])

ROOT_FOLDER = "moment"
REGISTRATION_FOLDER = f"{ROOT_FOLDER}/aadhar"

ALLOWED_IMAGE_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
    "image/svg+xml",
    "image/heic",
    "image/heif",
    "image/avif",
}
# Registration documents may also be scanned PDFs
ALLOWED_DOCUMENT_TYPES = ALLOWED_IMAGE_TYPES | {"application/pdf"}

DANGEROUS_FILENAME_CHARS = ("..", "/", "\\", "<", ">", ":", '"', "|", "?", "*")


def user_folder(uid: str) -> str:
    return f"{ROOT_FOLDER}/{uid}"


def owner_of(public_id: str) -> Optional[str]:
    """uid encoded in a key written by an authenticated upload"""
    parts = public_id.split("/")
    if len(parts) >= 3 and parts[0] == ROOT_FOLDER and parts[1] != "aadhar":
        return parts[1]
    return None


async def read_validated(file: UploadFile, allowed_types: set[str]) -> bytes:
    if file.content_type not in allowed_types:
        raise ValidationError(f"Invalid file type '{file.content_type}'")

    if file.filename:
        for char in DANGEROUS_FILENAME_CHARS:
            if char in file.filename:
                logger.warning(f"❌ Dangerous character '{char}' detected in filename: '{file.filename}'")
                raise ValidationError(f"Invalid filename - contains dangerous character '{char}'")
        if len(file.filename) > 255:
            raise ValidationError("Filename too long - maximum 255 characters")

    contents = await file.read()
    if not contents:
        raise ValidationError("Uploaded file is empty")
    if len(contents) > MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise ValidationError(
            f"File size exceeds {MAX_UPLOAD_SIZE_MB}MB limit. "
            f"Your file is {len(contents) / (1024 * 1024):.2f}MB."
        )
    return contents


async def relay_upload(relay: UploadRelay, file: UploadFile, folder: str, allowed_types: set[str]) -> dict:
    contents = await read_validated(file, allowed_types)
    return await run_in_threadpool(relay.upload, contents, folder, file.filename, file.content_type)


@router.post("")
async def upload_registration_document(
    file: Optional[UploadFile] = File(None),
    principal: Optional[Principal] = Depends(get_optional_principal),
    relay: UploadRelay = Depends(get_upload_relay),
):
    """Public upload used during provider sign-up (identity document)"""
    authorize(principal, Action.UPLOAD_PUBLIC)
    if file is None:
        raise ValidationError("No file uploaded")
    result = await relay_upload(relay, file, REGISTRATION_FOLDER, ALLOWED_DOCUMENT_TYPES)
    return {"success": True, **result}


@router.post("/single")
async def upload_single(
    image: Optional[UploadFile] = File(None),
    principal: Principal = Depends(get_current_principal),
    relay: UploadRelay = Depends(get_upload_relay),
):
    authorize(principal, Action.UPLOAD)
    if image is None:
        raise ValidationError("No file uploaded")
    result = await relay_upload(relay, image, user_folder(principal.subject_id), ALLOWED_IMAGE_TYPES)
    return {"success": True, **result}


@router.post("/multiple")
async def upload_multiple(
    images: Optional[list[UploadFile]] = File(None),
    principal: Principal = Depends(get_current_principal),
    relay: UploadRelay = Depends(get_upload_relay),
):
    authorize(principal, Action.UPLOAD)
    if not images:
        raise ValidationError("No files uploaded")
    if len(images) > MAX_UPLOAD_FILES:
        raise ValidationError(f"Too many files - maximum {MAX_UPLOAD_FILES} per upload")

    folder = user_folder(principal.subject_id)
    results = [await relay_upload(relay, image, folder, ALLOWED_IMAGE_TYPES) for image in images]
    return {"success": True, "images": results}


@router.delete("/{public_id:path}")
async def delete_upload(
    public_id: str,
    principal: Principal = Depends(get_current_principal),
    relay: UploadRelay = Depends(get_upload_relay),
):
    if ".." in public_id or not public_id.startswith(f"{ROOT_FOLDER}/"):
        raise ValidationError("Invalid file identifier")
    authorize(principal, Action.UPLOAD_DELETE, {"id": public_id, "ownerId": owner_of(public_id)})
    await run_in_threadpool(relay.delete, public_id)
    return {"success": True, "message": "Image deleted successfully"}
