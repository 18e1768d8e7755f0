from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from ..common.validators import require_employer_no, require_period
from ..core.exceptions import ReferenceLookupError

logger = logging.getLogger(__name__)

_HIDDEN_INPUT = re.compile(r'<input[^>]*type="hidden"[^>]*name="([^"]+)"[^>]*value="([^"]*)"', re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")


@dataclass(frozen=True)
class ReferenceInfo:
    reference_no: str
    employer_name: str = ""

    def to_dict(self) -> dict:
        return {"referenceNo": self.reference_no, "name": self.employer_name}


class ReferenceResolver(Protocol):
    def lookup(self, employer_no: str, period: str) -> ReferenceInfo:
        raise NotImplementedError


def _span_value(html: str, span_id: str) -> Optional[str]:
    match = re.search(rf'<span id="{span_id}">.*?</span>', html, re.DOTALL)
    if not match:
        return None
    text = _TAG.sub("", match.group(0))
    _, sep, value = text.partition(":")
    value = value.strip() if sep else text.strip()
    return value or None


class CbslReferenceResolver:
    """EPF reference number lookup against the CBSL web form.

    The form is an ASP.NET page, so the hidden state fields are read from a GET
    before posting the employer zone/number and the ``YYYYMM`` month.
    """

    def __init__(self, url: str, *, timeout: float = 15.0, session: Optional[requests.Session] = None):
        self._url = url
        self._timeout = timeout
        self._session = session or requests.Session()

    def lookup(self, employer_no: str, period: str) -> ReferenceInfo:
        employer_no = require_employer_no(employer_no)
        period = require_period(period)
        zone, _, number = employer_no.partition("/")

        try:
            form = self._session.get(self._url, timeout=self._timeout)
            form.raise_for_status()
            payload = dict(_HIDDEN_INPUT.findall(form.text))
            payload.update(
                {
                    "zn": zone.upper(),
                    "em": number,
                    "mn": period.replace("-", ""),
                    "sb": "1",
                    "checkb": "Get Reference",
                }
            )
            resp = self._session.post(
                self._url,
                data=payload,
                headers={"Referer": self._url},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Reference lookup failed for %s %s: %s", employer_no, period, e)
            raise ReferenceLookupError(f"Reference lookup failed: {e}") from e

        reference_no = _span_value(resp.text, "refno")
        if not reference_no:
            raise ReferenceLookupError(f"No reference number for {employer_no} in {period}")
        return ReferenceInfo(reference_no=reference_no, employer_name=_span_value(resp.text, "empnm") or "")
