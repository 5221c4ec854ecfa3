import dataclasses
from dataclasses import dataclass

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from flowspec.errors import ConfigurationError

STATUS_AGGREGATION_STRATEGIES = ("exact", "range", "auto")


@dataclass(frozen=True)
class GenerationOptions:
    """
    Tunables for contract generation.

    ``min_endpoint_samples`` drops templated endpoints seen fewer times than
    this. ``min_sample_size`` is the number of records a path position needs
    before it may be turned into a placeholder, and
    ``path_clustering_threshold`` the unique/total ratio it must reach.
    ``required_threshold`` is the presence ratio at which a header or query
    key becomes required.
    """

    min_endpoint_samples: int = 5
    min_sample_size: int = 20
    path_clustering_threshold: float = 0.8
    required_threshold: float = 0.95
    status_aggregation: str = "auto"
    max_unique_values: int = 10000
    service_name: str = "generated-service"
    service_version: str = "v1.0.0"

    def validate(self) -> "GenerationOptions":
        """Raise ConfigurationError for the first out-of-domain option."""
        for name in ("min_endpoint_samples", "min_sample_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(name, value, "must be a non-negative integer")

        if isinstance(self.max_unique_values, bool) or not isinstance(self.max_unique_values, int) \
                or self.max_unique_values < 1:
            raise ConfigurationError("max_unique_values", self.max_unique_values, "must be a positive integer")

        for name in ("path_clustering_threshold", "required_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                raise ConfigurationError(name, value, "must be between 0.0 and 1.0")

        if self.status_aggregation not in STATUS_AGGREGATION_STRATEGIES:
            raise ConfigurationError(
                "status_aggregation",
                self.status_aggregation,
                f"must be one of {', '.join(STATUS_AGGREGATION_STRATEGIES)}",
            )

        if not self.service_name:
            raise ConfigurationError("service_name", self.service_name, "must not be empty")
        return self

    def with_overrides(self, **overrides) -> "GenerationOptions":
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_env(cls) -> "GenerationOptions":
        """Build options from FLOWSPEC_* environment variables, falling back to defaults."""
        try:
            settings = GenerationSettings()
        except ValidationError as exc:
            error = exc.errors()[0]
            raise ConfigurationError(str(error["loc"][0]), error.get("input"), error["msg"]) from exc
        return cls(**settings.model_dump()).validate()


class GenerationSettings(BaseSettings):
    """Environment view of GenerationOptions: ``FLOWSPEC_MIN_SAMPLE_SIZE=10`` and so on."""

    model_config = SettingsConfigDict(env_prefix="FLOWSPEC_", env_ignore_empty=True, extra="ignore")

    min_endpoint_samples: int = GenerationOptions.min_endpoint_samples
    min_sample_size: int = GenerationOptions.min_sample_size
    path_clustering_threshold: float = GenerationOptions.path_clustering_threshold
    required_threshold: float = GenerationOptions.required_threshold
    status_aggregation: str = GenerationOptions.status_aggregation
    max_unique_values: int = GenerationOptions.max_unique_values
    service_name: str = GenerationOptions.service_name
    service_version: str = GenerationOptions.service_version
