from notmodified._core._headers import (
    WILDCARD as WILDCARD,
    EntityTag as EntityTag,
    ETagCandidate as ETagCandidate,
    Headers as Headers,
    Wildcard as Wildcard,
    parse_entity_tag as parse_entity_tag,
    parse_entity_tag_list as parse_entity_tag_list,
)
from notmodified._core._spec import (
    ConditionalOptions as ConditionalOptions,
    evaluate as evaluate,
    extract_conditionals as extract_conditionals,
    extract_validators as extract_validators,
    is_valid_past as is_valid_past,
    matches_any as matches_any,
    meets_conditions as meets_conditions,
)
from notmodified._core.models import (
    ConditionalRequestHeaders as ConditionalRequestHeaders,
    Method as Method,
    Request as Request,
    Response as Response,
    ResponseMetadata as ResponseMetadata,
    ResponseValidators as ResponseValidators,
    Verdict as Verdict,
)

__all__ = (
    ## Evaluator
    "ConditionalOptions",
    "evaluate",
    "meets_conditions",
    "extract_conditionals",
    "extract_validators",
    "matches_any",
    "is_valid_past",
    ## Models
    "ConditionalRequestHeaders",
    "ResponseValidators",
    "Method",
    "Verdict",
    "Request",
    "Response",
    "ResponseMetadata",
    ## Headers
    "Headers",
    "EntityTag",
    "ETagCandidate",
    "Wildcard",
    "WILDCARD",
    "parse_entity_tag",
    "parse_entity_tag_list",
)
