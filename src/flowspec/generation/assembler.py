from collections.abc import Iterable

from flowspec.config import GenerationOptions
from flowspec.inference.aggregator import EndpointAccumulator, OperationAccumulator
from flowspec.inference.fields import infer_fields
from flowspec.inference.status import aggregate_status_codes
from flowspec.models import (
    EndpointSpec,
    FieldSet,
    OperationSpec,
    ServiceSpec,
    ServiceSpecMetadata,
    SpecStats,
)


def build_operation(acc: OperationAccumulator, options: GenerationOptions) -> OperationSpec:
    required_headers, optional_headers = infer_fields(
        acc.header_counts, acc.sample_count, options.required_threshold
    )
    required_query, optional_query = infer_fields(
        acc.query_counts, acc.sample_count, options.required_threshold
    )
    return OperationSpec(
        method=acc.method,
        responses=aggregate_status_codes(acc.status_codes, options.status_aggregation),
        required=FieldSet(headers=required_headers, query=required_query),
        optional=FieldSet(headers=optional_headers, query=optional_query),
        stats=SpecStats(
            support_count=acc.sample_count,
            first_seen=acc.first_seen,
            last_seen=acc.last_seen,
        ),
    )


def build_endpoint(acc: EndpointAccumulator, options: GenerationOptions) -> EndpointSpec:
    operations = tuple(
        build_operation(op, options)
        for _, op in sorted(acc.operations.items())
    )
    first_seen = [op.stats.first_seen for op in operations if op.stats.first_seen is not None]
    last_seen = [op.stats.last_seen for op in operations if op.stats.last_seen is not None]
    return EndpointSpec(
        path=acc.path,
        operations=operations,
        stats=SpecStats(
            support_count=acc.sample_count,
            first_seen=min(first_seen, default=None),
            last_seen=max(last_seen, default=None),
        ),
    )


def assemble(endpoints: Iterable[EndpointAccumulator], options: GenerationOptions) -> ServiceSpec:
    """
    Compose the contract document.

    Endpoints are sorted by templated path and operations by method so the
    same traffic always yields the same document, whatever order it arrived in.
    """
    return ServiceSpec(
        metadata=ServiceSpecMetadata(name=options.service_name, version=options.service_version),
        endpoints=tuple(
            build_endpoint(acc, options)
            for acc in sorted(endpoints, key=lambda acc: acc.path)
        ),
    )
