# Image upload handling (avatars and playlist covers)

import os
import uuid
import logging
from werkzeug.utils import secure_filename
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def allowed_image(filename, extensions):
    # Check if file extension is an allowed image type
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in extensions


def save_uploaded_image(file, subfolder, upload_folder, extensions, max_size=(1500, 1500)):

    # Save uploaded image to subfolder with UUID prefix and cap its dimensions
    # Args:
    #   file: Flask FileStorage object
    #   subfolder: subdirectory name (avatars, covers)
    #   upload_folder: base upload folder path
    #   extensions: allowed lowercase extensions
    #   max_size: tuple of (width, height), aspect ratio is kept
    # Returns:
    #   str: URL path to saved file, or None if the file is not a usable image

    if not file or not file.filename or not allowed_image(file.filename, extensions):
        return None

    filename = secure_filename(file.filename)
    unique_filename = f"{uuid.uuid4()}_{filename}"
    filepath = os.path.join(upload_folder, subfolder, unique_filename)

    # Ensure directory exists
    os.makedirs(os.path.dirname(filepath), exist_ok=True)

    file.save(filepath)

    if not resize_image(filepath, max_size):
        os.remove(filepath)
        return None

    return f"/uploads/{subfolder}/{unique_filename}"


def resize_image(filepath, max_size=(1500, 1500)):
    # Shrink image to fit within max_size; returns False when the file is not an image
    try:
        with Image.open(filepath) as img:
            img.load()
            if img.width > max_size[0] or img.height > max_size[1]:
                img.thumbnail(max_size, Image.Resampling.LANCZOS)
                img.save(filepath)
        return True
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"[UPLOAD] rejected {os.path.basename(filepath)}: {e}")
        return False


def remove_uploaded_file(url, upload_folder):
    # Delete a previously saved /uploads/... file, ignoring external URLs
    if not url or not url.startswith('/uploads/'):
        return
    relative = url[len('/uploads/'):]
    abs_path = os.path.join(upload_folder, *relative.split('/'))
    try:
        if os.path.exists(abs_path):
            os.remove(abs_path)
    except OSError as e:
        logger.warning(f"[UPLOAD] could not remove {relative}: {e}")
