"""vlmrun-actions - workflow actions backed by the VLM Run inference API."""

from dotenv import load_dotenv

# Load environment variables from .env before settings are read
load_dotenv()

from .actions import check_credentials, perform, perform_resume, run_operation  # noqa: E402
from .client import Endpoint, VLMRunClient  # noqa: E402
from .completion import (  # noqa: E402
    CallbackCompletion,
    CompletionResolver,
    PollingCompletion,
    build_completion_resolver,
)
from .dispatcher import Dispatcher  # noqa: E402
from .exceptions import *  # noqa: E402, F403
from .infra import *  # noqa: E402, F403
from .media import open_stream, to_inline_payload, upload_file  # noqa: E402
from .models import (  # noqa: E402
    ActionInputs,
    ClassifiedError,
    FileHandle,
    InlinePayload,
    JobRecord,
    JobRequest,
    JobStatus,
)
from .operations import Domain, Family, Operation, Resource, resolve_domain  # noqa: E402
from .responses import classify_response  # noqa: E402

try:
    from importlib.metadata import version as _get_version

    __version__ = _get_version("vlmrun-actions")
except Exception:
    # fallback during local editable development
    __version__ = "0.0.0"
