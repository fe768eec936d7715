"""Operations, domains and the families the dispatcher routes on.

An :class:`Operation` is the user-selectable action of one invocation.
Some operations map to a :class:`Domain`, the taxonomy string the remote
service uses to pick its internal pipeline; the mapping is a fixed static
table and :func:`resolve_domain` is a pure lookup over it.
"""

from __future__ import annotations

import enum
from typing import Any

from .exceptions import InvalidOperationError


class Operation(str, enum.Enum):
    RESUME_PARSER = "resumeParser"
    INVOICE_PARSER = "invoiceParser"
    PRESENTATION_PARSER = "presentationParser"
    FORM_FILLING = "formFilling"
    IMAGE_CATALOGING = "imageCataloging"
    IMAGE_CAPTIONING = "imageCaptioning"
    FILE_LIST = "fileList"
    FILE_UPLOAD = "fileUpload"
    GITHUB_AGENT = "githubAgent"
    MARKET_RESEARCH_AGENT = "marketResearchAgent"
    AUDIO_TRANSCRIPTION = "audioTranscription"
    IMAGE_EMBEDDING = "imageEmbedding"
    DOCUMENT_EMBEDDING = "documentEmbedding"

    @classmethod
    def parse(cls, value: Any) -> Operation:
        """Return the operation for *value* or raise :class:`InvalidOperationError`."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidOperationError(value) from None

    def __str__(self) -> str:
        return self.value


class Domain(str, enum.Enum):
    # Public schemas
    DOCUMENT_GENERATIVE = "document.generative"
    DOCUMENT_PRESENTATION = "document.presentation"
    DOCUMENT_VISUAL_GROUNDING = "document.visual-grounding"

    # Document extraction
    DOCUMENT_INVOICE = "document.invoice"
    DOCUMENT_RESUME = "document.resume"
    DOCUMENT_HEALTH_INSURANCE_CARD = "document.health-insurance-card"
    DOCUMENT_DRIVERS_LICENSE = "document.drivers-license"
    DOCUMENT_RECEIPT = "document.receipt"
    DOCUMENT_SCHEMA_CREATION = "document.schema-creation"

    # Documents with paragraphs, tables, charts
    DOCUMENT_PDF = "document.pdf"
    DOCUMENT_FILE = "document.file"
    DOCUMENT_PDF_AUTOFILL = "document.pdf-autofill"
    DOCUMENT_HARDWARE_SPEC_SHEET = "document.hardware-spec-sheet"

    AUDIO_TRANSCRIPTION = "audio.transcription"

    IMAGE_EMBEDDINGS = "image.embeddings"
    IMAGE_CAPTION = "image.caption"

    VIDEO_TRANSCRIPTION = "video.transcription"
    VIDEO_EMBEDDINGS = "video.embeddings"
    VIDEO_GENERATIVE_EMBEDDINGS = "video.generative-embeddings"

    # Experimental
    SPORTS_NFL = "sports.nfl"
    SPORTS_NBA = "sports.nba"
    SPORTS_SOCCER = "sports.soccer"
    VIDEO_TV_NEWS = "video.tv-news"
    VIDEO_TV_INTELLIGENCE = "video.tv-intelligence"
    WEB_ECOMMERCE_PRODUCT_CATALOG = "web.ecommerce-product-catalog"
    WEB_GITHUB_DEVELOPER_STATS = "web.github-developer-stats"
    WEB_MARKET_RESEARCH = "web.market-research"
    SOCIAL_TWITTER_CARD = "social.twitter-card"
    DOCUMENT_MULTIMODAL_EMBEDDINGS = "document.multimodal-embeddings"
    DOCUMENT_MULTIMODAL_RAG = "document.multimodal-rag"

    def __str__(self) -> str:
        return self.value


OPERATION_TO_DOMAIN: dict[Operation, Domain] = {
    Operation.RESUME_PARSER: Domain.DOCUMENT_RESUME,
    Operation.INVOICE_PARSER: Domain.DOCUMENT_INVOICE,
    Operation.PRESENTATION_PARSER: Domain.DOCUMENT_PRESENTATION,
    Operation.FORM_FILLING: Domain.DOCUMENT_PDF_AUTOFILL,
    Operation.AUDIO_TRANSCRIPTION: Domain.AUDIO_TRANSCRIPTION,
    Operation.IMAGE_CAPTIONING: Domain.DOCUMENT_GENERATIVE,
    Operation.GITHUB_AGENT: Domain.WEB_GITHUB_DEVELOPER_STATS,
    Operation.MARKET_RESEARCH_AGENT: Domain.WEB_MARKET_RESEARCH,
}


def resolve_domain(operation: Operation | str) -> Domain | None:
    """Return the domain for *operation*, or ``None`` when it carries none."""
    try:
        operation = Operation(operation)
    except ValueError:
        return None
    return OPERATION_TO_DOMAIN.get(operation)


class Family(str, enum.Enum):
    DOCUMENT = "document"
    IMAGE = "image"
    AGENT = "agent"
    AUDIO = "audio"
    EMBEDDING = "embedding"
    FILE = "file"


FAMILIES: dict[Family, frozenset[Operation]] = {
    Family.DOCUMENT: frozenset(
        {
            Operation.RESUME_PARSER,
            Operation.INVOICE_PARSER,
            Operation.PRESENTATION_PARSER,
            Operation.FORM_FILLING,
        }
    ),
    Family.IMAGE: frozenset({Operation.IMAGE_CATALOGING, Operation.IMAGE_CAPTIONING}),
    Family.AGENT: frozenset({Operation.GITHUB_AGENT, Operation.MARKET_RESEARCH_AGENT}),
    Family.AUDIO: frozenset({Operation.AUDIO_TRANSCRIPTION}),
    Family.EMBEDDING: frozenset({Operation.DOCUMENT_EMBEDDING, Operation.IMAGE_EMBEDDING}),
    Family.FILE: frozenset({Operation.FILE_LIST, Operation.FILE_UPLOAD}),
}


def family_of(operation: Operation) -> Family:
    for family, members in FAMILIES.items():
        if operation in members:
            return family
    raise AssertionError(f"operation {operation!r} is not routed to any family")


# ── Host-facing actions ──────────────────────────────────────────────────


class Resource(str, enum.Enum):
    """The actions an automation host exposes, each offering a few operations."""

    DOCUMENT_AI = "documentAi"
    AUDIO_AI = "audioAi"
    IMAGE_AI = "imageAi"
    AGENT_AI = "agentAi"
    FILE = "file"
    EXPERIMENTAL = "experimental"


RESOURCE_OPERATIONS: dict[Resource, tuple[Operation, ...]] = {
    Resource.DOCUMENT_AI: (
        Operation.RESUME_PARSER,
        Operation.PRESENTATION_PARSER,
        Operation.INVOICE_PARSER,
        Operation.FORM_FILLING,
    ),
    Resource.IMAGE_AI: (Operation.IMAGE_CAPTIONING, Operation.IMAGE_CATALOGING),
    Resource.AUDIO_AI: (Operation.AUDIO_TRANSCRIPTION,),
    Resource.AGENT_AI: (Operation.GITHUB_AGENT, Operation.MARKET_RESEARCH_AGENT),
    Resource.EXPERIMENTAL: (Operation.IMAGE_EMBEDDING, Operation.DOCUMENT_EMBEDDING),
    Resource.FILE: (Operation.FILE_LIST, Operation.FILE_UPLOAD),
}

MODEL_CHOICES: dict[str, str] = {"vlm-1": "VLM-1"}
EMBEDDING_MODEL_CHOICES: dict[str, str] = {"vlm-1-embeddings": "VLM-1 Embeddings"}
MODE_CHOICES: dict[str, str] = {"fast": "Fast", "accurate": "Accurate"}
