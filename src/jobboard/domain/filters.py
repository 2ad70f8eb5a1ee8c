"""Equality filters for list endpoints.

Each list endpoint recognizes a fixed set of query parameters. Only
parameters that are present and non-empty become predicates; enum values
are not validated here and simply match nothing when unknown.
"""

from collections.abc import Iterable, Mapping

USER_FILTER_FIELDS = frozenset({"role"})
JOB_FILTER_FIELDS = frozenset({"jobType", "experienceLevel", "recruiterId"})
APPLICATION_FILTER_FIELDS = frozenset({"status", "jobId", "candidateId"})


def build_filters(
    params: Mapping[str, str | None],
    recognized: Iterable[str],
) -> dict[str, str]:
    """Build an equality-predicate mapping from raw query parameters.

    Args:
        params: Raw parameter values keyed by public (camelCase) name
        recognized: Parameter names this endpoint filters on

    Returns:
        Mapping of parameter name to value for every recognized parameter
        that was supplied with a non-empty value
    """
    filters: dict[str, str] = {}
    for name in recognized:
        value = params.get(name)
        if value is None:
            continue
        value = value.strip()
        if value:
            filters[name] = value
    return filters
