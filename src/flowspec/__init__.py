from flowspec.capture.record import NormalizedRecord
from flowspec.capture.source import RecordSource, records_from_dicts
from flowspec.config import GenerationOptions
from flowspec.errors import ConfigurationError, ExitCode, FlowSpecError, IngestionError
from flowspec.generation.engine import GenerationResult, generate, generate_spec
from flowspec.models import EndpointSpec, OperationSpec, ServiceSpec

__all__ = [
    "ConfigurationError",
    "EndpointSpec",
    "ExitCode",
    "FlowSpecError",
    "GenerationOptions",
    "GenerationResult",
    "IngestionError",
    "NormalizedRecord",
    "OperationSpec",
    "RecordSource",
    "ServiceSpec",
    "generate",
    "generate_spec",
    "records_from_dicts",
]
