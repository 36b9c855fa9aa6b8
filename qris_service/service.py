"""
Generation facade used by the HTTP layer.

generate: rewrite -> render -> cache, returning the final payload and the
artifact id. resolve: artifact id -> PNG bytes until the artifact expires.
"""

import logging
from dataclasses import dataclass

from .cache import ArtifactCache
from .errors import MalformedPayload, MissingInput, NotFoundOrExpired, RenderError
from .renderer import QRCodeRenderer
from .rewriter import CHECKSUM_LENGTH, PayloadRewriter, parse_amount

LOG = logging.getLogger("qris_service.service")


@dataclass(frozen=True)
class GenerateResult:
    final_payload: str
    artifact_id: str
    amount: object
    crc: str
    image: bytes


class QrisService:
    def __init__(self, rewriter: PayloadRewriter, renderer: QRCodeRenderer, cache: ArtifactCache):
        self.rewriter = rewriter
        self.renderer = renderer
        self.cache = cache

    def generate(self, raw_payload, amount) -> GenerateResult:
        if raw_payload is None or (isinstance(raw_payload, str) and not raw_payload.strip()):
            raise MissingInput("base_string is required")
        if amount is None or amount == "":
            raise MissingInput("amount is required")
        if not isinstance(raw_payload, str):
            raise MalformedPayload("base_string must be a string")

        value = parse_amount(amount)
        final_payload = self.rewriter.rewrite(raw_payload, value)

        try:
            image = self.renderer.render(final_payload)
        except RenderError:
            LOG.error("render failed", extra={"payload_length": len(final_payload)})
            raise

        artifact_id = self.cache.put(image)
        LOG.info(
            "generated dynamic QRIS",
            extra={"artifact_id": artifact_id, "mode": self.rewriter.mode.value},
        )
        return GenerateResult(
            final_payload=final_payload,
            artifact_id=artifact_id,
            amount=value,
            crc=final_payload[-CHECKSUM_LENGTH:],
            image=image,
        )

    def resolve(self, artifact_id: str) -> bytes:
        image = self.cache.get(artifact_id) if artifact_id else None
        if image is None:
            raise NotFoundOrExpired()
        return image
