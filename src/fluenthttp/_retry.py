import time
from logging import getLogger
from typing import Callable, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from ._response import Response
from ._utils.constants import LOGGER_NAME
from .models.errors import TransportError

RetryPredicate = Callable[[Response, Optional[BaseException]], bool]

logger = getLogger(LOGGER_NAME)


class RetryPolicy(BaseModel):
    """How many times to attempt a request and when to try again.

    Attributes:
        times: Total number of attempts, including the first one.
        delay: Pause between attempts, in milliseconds.
        when: Called as ``when(response, error)``; a truthy result requests
            another attempt. Without it nothing is ever retried.
        throw: Kept with the policy for callers that want to raise once
            attempts run out; the retry loop itself never raises.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    times: int = Field(default=1, ge=1)
    delay: float = Field(default=0, ge=0)
    when: Optional[RetryPredicate] = None
    throw: bool = True


class _Attempt(NamedTuple):
    response: Response
    error: Optional[TransportError] = None


def run_with_retries(
    call: Callable[[], Response], policy: Optional[RetryPolicy] = None
) -> Response:
    """Invoke ``call`` until the policy accepts its outcome or attempts run out.

    Transport failures are turned into a zero-status ``Response``. A
    completed response is only ever retried when it failed (status >= 400)
    and the policy predicate asks for it. When every attempt is used up the
    last response seen is returned.

    Exceptions raised by the predicate propagate to the caller.
    """
    policy = policy or RetryPolicy()

    def attempt() -> _Attempt:
        try:
            return _Attempt(call())
        except TransportError as e:
            return _Attempt(Response.synthetic(), e)

    def should_retry(outcome: _Attempt) -> bool:
        if policy.when is None:
            return False
        if outcome.error is None and not outcome.response.failed():
            return False
        return bool(policy.when(outcome.response, outcome.error))

    def log_retry(state: RetryCallState) -> None:
        outcome: _Attempt = state.outcome.result()  # type: ignore[union-attr]
        reason = (
            f"transport error: {outcome.error}"
            if outcome.error is not None
            else f"status {outcome.response.status()}"
        )
        logger.warning(
            f"Retrying request after {reason} "
            f"(attempt {state.attempt_number}/{policy.times})"
        )

    retrying = Retrying(
        stop=stop_after_attempt(policy.times),
        wait=wait_fixed(policy.delay / 1000),
        retry=retry_if_result(should_retry),
        before_sleep=log_retry,
        retry_error_callback=lambda state: state.outcome.result(),  # type: ignore[union-attr]
        sleep=time.sleep,
    )

    return retrying(attempt).response
