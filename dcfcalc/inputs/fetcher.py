'''
Live company data lookup.

One HTTP POST (requests) to a text-generation messages endpoint asking for a
JSON object with fixed field names. The reply text is joined, stripped of
markdown fences and parsed; every failure (transport, HTTP status, malformed
reply) comes back as Unavailable(reason) rather than an exception.

Only the latest request matters: each call takes a new generation number
and a reply arriving after a newer call started is reported as
Unavailable('superseded').
'''

import json
import logging
import os
import re
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from dcfcalc.inputs.profiles import CompanyProfile
from dcfcalc.inputs.profiles import Fetched
from dcfcalc.inputs.profiles import FetchOutcome
from dcfcalc.inputs.profiles import Unavailable

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.anthropic.com/v1/messages'
DEFAULT_MODEL = 'claude-sonnet-4-20250514'
DEFAULT_MAX_TOKENS = 800
DEFAULT_TIMEOUT_SEC = 30.0
API_VERSION = '2023-06-01'

PAYLOAD_FIELDS = (
    'companyName',
    'ticker',
    'currency',
    'currencySymbol',
    'currentPrice',
    'revenue',
    'ebitdaMargin',
    'netDebt',
    'sharesOutstanding',
    'capexPercent',
    'daPercent',
    'taxRate',
    'revenueGrowthLast',
)

_FENCE_RE = re.compile(r'```(?:json)?')


@dataclass(frozen=True)
class FetchSettings:
  api_url: str = DEFAULT_API_URL
  model: str = DEFAULT_MODEL
  api_key: Optional[str] = None
  max_tokens: int = DEFAULT_MAX_TOKENS
  timeout_sec: float = DEFAULT_TIMEOUT_SEC

  @classmethod
  def from_env(cls) -> 'FetchSettings':
    '''
    Settings from DCFCALC_API_URL, DCFCALC_MODEL, ANTHROPIC_API_KEY and
    DCFCALC_TIMEOUT, with defaults for anything unset.
    '''
    timeout = os.environ.get('DCFCALC_TIMEOUT')
    return cls(
        api_url=os.environ.get('DCFCALC_API_URL', DEFAULT_API_URL),
        model=os.environ.get('DCFCALC_MODEL', DEFAULT_MODEL),
        api_key=os.environ.get('ANTHROPIC_API_KEY') or None,
        timeout_sec=float(timeout) if timeout else DEFAULT_TIMEOUT_SEC,
    )

  def headers(self) -> Dict[str, str]:
    headers = {'Content-Type': 'application/json'}
    if self.api_key:
      headers['x-api-key'] = self.api_key
      headers['anthropic-version'] = API_VERSION
    return headers


def build_prompt(ticker: str) -> str:
  fields = ', '.join(PAYLOAD_FIELDS)
  return (
      f'Return the latest fiscal-year financial data for the company with '
      f'ticker "{ticker}" as a single JSON object with exactly these keys: '
      f'{fields}. Currency amounts are in millions of the reporting '
      f'currency; margins, percentages and growth are plain numbers in '
      f'percent; netDebt is total debt minus cash. Respond with JSON only.')


def strip_markdown_fences(text: str) -> str:
  return _FENCE_RE.sub('', text).strip()


def parse_company_payload(body: Any) -> Dict[str, Any]:
  '''
  Extract the company JSON object from a messages API response body.

  Raises:
    ValueError: If the body is not an object, has no text content, or the
      text is not a JSON object
  '''
  if not isinstance(body, dict):
    raise ValueError(f'expected a JSON object body, got {type(body).__name__}')
  content = body.get('content')
  if not isinstance(content, list):
    raise ValueError('response has no content')
  text = ''.join(
      block['text']
      for block in content
      if isinstance(block, dict) and block.get('type', 'text') == 'text' and
      isinstance(block.get('text'), str))
  payload = json.loads(strip_markdown_fences(text))
  if not isinstance(payload, dict):
    raise ValueError(f'expected a JSON object, got {type(payload).__name__}')
  return payload


class CompanyDataFetcher:
  '''Fetches company profiles; newer calls supersede older ones.'''

  def __init__(self,
               settings: Optional[FetchSettings] = None,
               session: Optional[requests.Session] = None):
    self.settings = settings or FetchSettings.from_env()
    self.session = session or requests.Session()
    self._generation = 0
    self._lock = threading.Lock()

  def _next_generation(self) -> int:
    with self._lock:
      self._generation += 1
      return self._generation

  def is_current(self, generation: int) -> bool:
    with self._lock:
      return generation == self._generation

  def _request(self, ticker: str) -> Dict[str, Any]:
    settings = self.settings
    resp = self.session.post(
        settings.api_url,
        headers=settings.headers(),
        json={
            'model': settings.model,
            'max_tokens': settings.max_tokens,
            'messages': [{
                'role': 'user',
                'content': build_prompt(ticker)
            }],
        },
        timeout=settings.timeout_sec,
    )
    status = int(resp.status_code)
    if status >= 400:
      raise requests.HTTPError(f'HTTP {status}: {resp.text[:200]}')
    return resp.json()

  def fetch(self, ticker: str) -> FetchOutcome:
    '''
    Look up one ticker.

    Args:
      ticker: Ticker as typed by the user

    Returns:
      Fetched(profile), or Unavailable(reason) on any failure or when a
      newer fetch started while this one was in flight
    '''
    ticker = ticker.strip()
    if not ticker:
      return Unavailable('empty ticker')

    generation = self._next_generation()
    logger.debug('Fetching %s (generation %d)', ticker, generation)
    try:
      body = self._request(ticker)
      payload = parse_company_payload(body)
    except (requests.RequestException, ValueError) as e:
      logger.warning('Fetch failed for %s: %s', ticker, e)
      outcome: FetchOutcome = Unavailable(str(e))
    else:
      outcome = Fetched(CompanyProfile.from_payload(payload, ticker.upper()))

    if not self.is_current(generation):
      logger.debug('Discarding superseded fetch for %s', ticker)
      return Unavailable('superseded')
    return outcome
