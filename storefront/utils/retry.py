# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests

from storefront.domain.errors import TransitionConflictError
from storefront.utils.settings import STATUS_UPDATE_ATTEMPTS


# tylko dla wywolan bez efektow ubocznych (odczyt, render)
def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
    )


# konflikt warunkowego update statusu -> swiezy odczyt i ponowna proba
def conflict_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(STATUS_UPDATE_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(TransitionConflictError),
    )
