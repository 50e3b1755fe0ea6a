"""Validation of uploaded images before they are queued."""
from typing import Optional
from welltrack.core.enums import ImageContentType
from welltrack.core.exceptions import UnsupportedImageTypeError, ValidationError
from welltrack.worker.models import AnalysisTask

ALLOWED_CONTENT_TYPES = {content_type.value for content_type in ImageContentType}
DEFAULT_FILE_NAMES = {
    ImageContentType.JPEG.value: "image.jpg",
    ImageContentType.PNG.value: "image.png",
}


def build_analysis_task(
    subject_id: str,
    payload: bytes,
    content_type: Optional[str],
    file_name: Optional[str],
) -> AnalysisTask:
    """
    Validate an upload and turn it into an analysis task.

    Args:
        subject_id: Subject the image belongs to
        payload: Raw image bytes
        content_type: MIME type declared by the client
        file_name: File name declared by the client

    Returns:
        AnalysisTask: Task ready to enqueue

    Raises:
        ValidationError: If the subject id is blank, the MIME type is not
            JPEG or PNG, or the image is empty
    """
    if not subject_id or not subject_id.strip():
        raise ValidationError("Subject id is required")

    # Drop parameters such as "; charset=binary"
    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedImageTypeError(
            f"Unsupported image type '{content_type}'. "
            f"Allowed types: {', '.join(sorted(ALLOWED_CONTENT_TYPES))}"
        )

    if not payload:
        raise ValidationError("Image file is empty")

    return AnalysisTask(
        subject_id=subject_id.strip(),
        payload=payload,
        content_type=media_type,
        file_name=file_name or DEFAULT_FILE_NAMES[media_type],
    )
