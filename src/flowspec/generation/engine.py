import logging
from dataclasses import dataclass

from flowspec.capture.record import NormalizedRecord
from flowspec.capture.source import RecordSource
from flowspec.config import GenerationOptions
from flowspec.errors import IngestionError
from flowspec.generation.assembler import assemble
from flowspec.inference.aggregator import aggregate
from flowspec.inference.segments import SegmentStatistics
from flowspec.inference.templater import PathTemplater
from flowspec.models import ServiceSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    spec: ServiceSpec
    records_seen: int = 0
    records_skipped: int = 0
    warnings: tuple[str, ...] = ()


def _collect(
    source: RecordSource,
    statistics: SegmentStatistics,
    warnings: list[str],
) -> tuple[list[NormalizedRecord], int]:
    """Read the source once, feeding the segment statistics and buffering well-formed records."""
    records: list[NormalizedRecord] = []
    seen = 0
    try:
        iterator = iter(source)
    except Exception as exc:
        raise IngestionError(f"record source cannot be read: {exc}", records_read=0) from exc
    while True:
        try:
            record = next(iterator)
        except StopIteration:
            break
        except Exception as exc:
            raise IngestionError(
                f"record source failed after {seen} record(s): {exc}",
                records_read=seen,
            ) from exc

        seen += 1
        if not isinstance(record, NormalizedRecord) or not record.is_well_formed():
            message = f"skipping malformed record #{seen}: missing method or path"
            logger.warning("flowspec: %s", message)
            warnings.append(message)
            continue

        statistics.observe(record)
        records.append(record)
    return records, seen


def generate(source: RecordSource, options: GenerationOptions | None = None) -> GenerationResult:
    """
    Infer a ServiceSpec from a stream of normalized traffic records.

    The source is consumed exactly once. Path templating needs the complete
    per-shape statistics, so records are buffered during that pass and
    grouped into endpoints afterwards. Options are validated before the
    source is touched; a source that raises aborts the run with
    IngestionError and no document.
    """
    options = (options or GenerationOptions()).validate()

    statistics = SegmentStatistics(max_unique_values=options.max_unique_values)
    warnings: list[str] = []
    records, seen = _collect(source, statistics, warnings)

    templater = PathTemplater(
        statistics,
        min_sample_size=options.min_sample_size,
        threshold=options.path_clustering_threshold,
    )
    endpoints = aggregate(records, templater, options.min_endpoint_samples)
    spec = assemble(endpoints.values(), options)

    logger.debug(
        "flowspec: generated %d endpoint(s) from %d record(s) across %d shape(s), %d skipped",
        len(spec.endpoints), len(records), len(statistics.shapes), seen - len(records),
    )
    return GenerationResult(
        spec=spec,
        records_seen=seen,
        records_skipped=seen - len(records),
        warnings=tuple(warnings),
    )


def generate_spec(source: RecordSource, options: GenerationOptions | None = None) -> ServiceSpec:
    return generate(source, options).spec
