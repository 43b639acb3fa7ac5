# openmensa_berlin/fetch.py
# HTTP-Abruf der XHR-Seiten mit linearem Backoff

import logging
import time

import requests
from bs4 import BeautifulSoup

from .config import HTTP_MAX_RETRIES, HTTP_SLEEP_STEP, HTTP_STATUS_OVERLOADED, HTTP_TIMEOUT
from .errors import CorruptResponse, RetriesExhausted, UnexpectedStatus

logger = logging.getLogger(__name__)


class Fetcher:
    """POSTs form data and returns the parsed HTML document.

    Network errors and the overloaded status are retried, sleeping
    ``attempt * sleep_step`` seconds before the next attempt. Any other
    non-200 status fails at once.
    """

    def __init__(self, session=None, max_retries=HTTP_MAX_RETRIES,
                 sleep_step=HTTP_SLEEP_STEP, timeout=HTTP_TIMEOUT, sleep=time.sleep):
        self.session = session if session is not None else requests.Session()
        self.max_retries = max_retries
        self.sleep_step = sleep_step
        self.timeout = timeout
        self._sleep = sleep

    def fetch(self, url, params=None):
        for attempt in range(1, self.max_retries + 1):
            try:
                r = self.session.post(url, data=params, timeout=self.timeout)
            except requests.RequestException as e:
                logger.warning("POST %s %s: attempt %d failed: %s", url, params, attempt, e)
                self._sleep(attempt * self.sleep_step)
                continue

            if r.status_code == 200:
                return self._parse(r, url, params)

            if r.status_code == HTTP_STATUS_OVERLOADED:
                logger.warning("POST %s %s: attempt %d got status %d, backing off",
                               url, params, attempt, r.status_code)
                self._sleep(attempt * self.sleep_step)
                continue

            logger.warning("POST %s %s: got status code %d", url, params, r.status_code)
            raise UnexpectedStatus("got status code %d" % r.status_code,
                                   url, params, status=r.status_code)

        logger.warning("aborting after %d retries for POST fetch at %s with %s",
                       self.max_retries, url, params)
        raise RetriesExhausted("aborting after %d retries" % self.max_retries, url, params)

    @staticmethod
    def _parse(r, url, params):
        try:
            return BeautifulSoup(r.content, "html.parser")
        except Exception as e:
            raise CorruptResponse("unparsable response: %s" % e, url, params) from e
