"""HTTP client for the external image inference service."""
import logging
import time
from typing import Any, Dict, Optional
import httpx
from pydantic import ValidationError as PydanticValidationError
from welltrack.core.exceptions import TransportError
from welltrack.observability.metrics import record_inference_call
from welltrack.worker.models import ObservationRaw

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"


class InferenceClient:
    """
    Sends images to the inference service.

    Each call opens a short-lived ``httpx.AsyncClient`` with the configured
    timeout. Every failure to obtain a usable JSON object surfaces as
    ``TransportError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize inference client.

        Args:
            base_url: Root URL of the inference service
            timeout_seconds: Transport timeout for each request
            transport: Optional httpx transport (tests inject a mock)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def analyze(
        self, payload: bytes, content_type: str, file_name: str
    ) -> ObservationRaw:
        """
        Analyze an image.

        Args:
            payload: Raw image bytes
            content_type: Image MIME type
            file_name: Original file name

        Returns:
            ObservationRaw: Decoded inference fields

        Raises:
            TransportError: If the call fails or the body is unusable
        """
        data = await self._post_image("/analyze", payload, content_type, file_name)
        try:
            return ObservationRaw.model_validate(data)
        except PydanticValidationError as e:
            raise TransportError(f"Malformed inference response: {e}") from e

    async def calibrate(
        self, payload: bytes, content_type: str, file_name: str
    ) -> Dict[str, Any]:
        """
        Compute baseline calibration values from an image.

        Returns:
            Dict[str, Any]: Calibration body as returned by the service

        Raises:
            TransportError: If the call fails or the body is unusable
        """
        return await self._post_image("/calibrate", payload, content_type, file_name)

    async def _post_image(
        self, path: str, payload: bytes, content_type: str, file_name: str
    ) -> Dict[str, Any]:
        files = {IMAGE_FIELD: (file_name, payload, content_type)}
        url = f"{self.base_url}{path}"
        started = time.perf_counter()
        status = "error"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(url, files=files)
                response.raise_for_status()
            status = "ok"
        except httpx.TimeoutException as e:
            status = "timeout"
            logger.warning(f"Inference request to {url} timed out")
            raise TransportError(
                f"Inference request timed out after {self.timeout_seconds} seconds"
            ) from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Inference API error: {e.response.status_code}")
            raise TransportError(
                f"Inference service returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Inference request failed: {e}")
            raise TransportError(f"Inference request failed: {e}") from e
        finally:
            record_inference_call(path, status, time.perf_counter() - started)

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError("Inference response is not valid JSON") from e

        if not isinstance(data, dict):
            raise TransportError("Inference response is not a JSON object")
        return data
