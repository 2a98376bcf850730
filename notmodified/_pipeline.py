from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Tuple, cast

from typing_extensions import assert_never

from notmodified._core._headers import Headers
from notmodified._core._spec import ConditionalOptions, meets_conditions
from notmodified._core.models import AnyIterable, Request, Response, ResponseMetadata, Verdict

logger = logging.getLogger("notmodified.pipeline")

Finalizer = Callable[[Request, Response], Response]


def apply_verdict(response: Response, verdict: Verdict) -> Response:
    """
    Turns a verdict into the response that should actually be sent.

    PROCEED hands back the very same response. NOT_MODIFIED and
    PRECONDITION_FAILED produce a copy with the 304/412 status, an empty body
    and the original headers; the given response is left untouched.
    """
    if verdict is Verdict.PROCEED:
        return response
    elif verdict is Verdict.NOT_MODIFIED or verdict is Verdict.PRECONDITION_FAILED:
        return replace(
            response,
            status_code=cast(int, verdict.status_code),
            headers=Headers({key: response.headers.get_list(key) or [] for key in response.headers}),
            stream=AnyIterable(),
            metadata=dict(response.metadata),
        )
    else:
        assert_never(verdict)


def conditional_finalizer(options: Optional[ConditionalOptions] = None) -> Finalizer:
    def finalize_conditions(request: Request, response: Response) -> Response:
        verdict = meets_conditions(request, response, options)
        logger.debug("Conditional verdict for %s %s: %s", request.method, request.url, verdict.name)

        finalized = apply_verdict(response, verdict)
        finalized.metadata.update(ResponseMetadata(notmodified_verdict=verdict.value))  # type: ignore
        return finalized

    return finalize_conditions


class FinalizationPipeline:
    """
    Ordered response-finalization callbacks, run once per outgoing response.

    Each finalizer receives the request and the response produced by the
    previous one. The pipeline marks the response as finalized in its
    metadata, and calling `finalize` again on it is a no-op.

    Args:
        finalizers: Finalizers to run, in order. Defaults to the conditional
            request finalizer alone.
        options: Options for the default conditional finalizer.

    Example:
        ```python
        pipeline = FinalizationPipeline()
        pipeline.register(add_server_header)
        response = pipeline.finalize(request, response)
        ```
    """

    def __init__(
        self,
        finalizers: Optional[Iterable[Finalizer]] = None,
        options: Optional[ConditionalOptions] = None,
    ) -> None:
        self.options = options if options is not None else ConditionalOptions()
        self._finalizers: List[Finalizer] = (
            list(finalizers) if finalizers is not None else [conditional_finalizer(self.options)]
        )

    @property
    def finalizers(self) -> Tuple[Finalizer, ...]:
        return tuple(self._finalizers)

    def register(self, finalizer: Finalizer) -> None:
        self._finalizers.append(finalizer)

    def finalize(self, request: Request, response: Response) -> Response:
        if response.metadata.get("notmodified_finalized"):
            logger.debug("Response already finalized, skipping pipeline")
            return response

        for finalizer in self._finalizers:
            response = finalizer(request, response)

        response.metadata.update(ResponseMetadata(notmodified_finalized=True))  # type: ignore
        return response
