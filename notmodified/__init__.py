from notmodified._core import (
    WILDCARD as WILDCARD,
    ConditionalOptions as ConditionalOptions,
    ConditionalRequestHeaders as ConditionalRequestHeaders,
    EntityTag as EntityTag,
    ETagCandidate as ETagCandidate,
    Headers as Headers,
    Method as Method,
    Request as Request,
    Response as Response,
    ResponseMetadata as ResponseMetadata,
    ResponseValidators as ResponseValidators,
    Verdict as Verdict,
    Wildcard as Wildcard,
    evaluate as evaluate,
    extract_conditionals as extract_conditionals,
    extract_validators as extract_validators,
    is_valid_past as is_valid_past,
    matches_any as matches_any,
    meets_conditions as meets_conditions,
    parse_entity_tag as parse_entity_tag,
    parse_entity_tag_list as parse_entity_tag_list,
)
from notmodified._exceptions import ParseError as ParseError, PreconditionError as PreconditionError
from notmodified._pipeline import (
    Finalizer as Finalizer,
    FinalizationPipeline as FinalizationPipeline,
    apply_verdict as apply_verdict,
    conditional_finalizer as conditional_finalizer,
)

__all__ = (
    # Evaluator
    "ConditionalOptions",
    "evaluate",
    "meets_conditions",
    "extract_conditionals",
    "extract_validators",
    "matches_any",
    "is_valid_past",
    # Models
    "ConditionalRequestHeaders",
    "ResponseValidators",
    "Method",
    "Verdict",
    "Request",
    "Response",
    "ResponseMetadata",
    # Headers
    "Headers",
    "EntityTag",
    "ETagCandidate",
    "Wildcard",
    "WILDCARD",
    "parse_entity_tag",
    "parse_entity_tag_list",
    # Pipeline
    "Finalizer",
    "FinalizationPipeline",
    "apply_verdict",
    "conditional_finalizer",
    # Exceptions
    "PreconditionError",
    "ParseError",
)
