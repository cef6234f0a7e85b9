# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
This module provides a small client for the Pisano REST API.
"""

import logging
import os
import re
import urllib.parse
from typing import Any, Dict, List, Optional

import requests


class PisanoApiError(Exception):
  """Base exception for failed Pisano API calls."""

  def __init__(self, message: str, status_code: Optional[int] = None):
    super().__init__(message)
    self.status_code = status_code


ENVIRONMENTS = {
    "try": "https://api.try.psn.cx",
    "stage": "https://api.stage.psn.cx",
    "prodtr": "https://api.pisano.com.tr",
    "prodeu": "https://api.pisano.co",
}
DEFAULT_ENVIRONMENT = "try"
# Seconds to wait for the API before giving up on a call. Calls are not retried.
REQUEST_TIMEOUT_SEC = 30

DASHBOARD_FLOW_URL = "https://try.psn.cx/beta/dashboard/flows/{flow_id}"

# Fixed settings of link campaigns created for converted surveys.
LINK_CAMPAIGN_DEFAULTS: Dict[str, Any] = {
    "operating_hours_attributes": [],
    "unsubscribe_visible": True,
    "timezone": "Istanbul",
    "pisano_branding": True,
    "send_emails_to_customers": False,
    "type": "Link",
    "status": "active",
    "operating_24_7": True,
    "customer_email_kind": "default",
}


def campaign_code(name: str) -> str:
  """Returns the url code of a campaign: 'Spring Survey' -> 'spring-survey'."""
  return re.sub(r"\s+", "-", name.lower())


class PisanoClient:
  """A wrapper around the Pisano REST API."""

  def __init__(
      self,
      token: str | None = None,
      environment: str | None = None,
      base_url: str | None = None,
      session: requests.Session | None = None,
      timeout: float = REQUEST_TIMEOUT_SEC,
  ):
    """Initializes the PisanoClient.

    Args:
      token: The Pisano API token. If not provided, the PISANO_TOKEN
        environment variable will be used.
      environment: One of ENVIRONMENTS. If not provided, the
        PISANO_ENVIRONMENT environment variable or "try" is used.
      base_url: Overrides the environment's API url.
      session: The requests session to send calls with.
      timeout: Seconds to wait for each call.
    """
    if not token:
      token = os.getenv("PISANO_TOKEN")
    if not token or not token.strip():
      raise ValueError(
          "Pisano token not provided and PISANO_TOKEN environment variable"
          " is not set."
      )
    environment = (
        environment or os.getenv("PISANO_ENVIRONMENT") or DEFAULT_ENVIRONMENT
    )
    if not base_url:
      if environment not in ENVIRONMENTS:
        raise ValueError(
            f"Unknown Pisano environment '{environment}', expected one of"
            f" {', '.join(ENVIRONMENTS)}."
        )
      base_url = ENVIRONMENTS[environment]

    self.token = token.strip()
    self.environment = environment
    self.base_url = base_url.rstrip("/")
    self.session = session or requests.Session()
    self.timeout = timeout

  @property
  def _token_headers(self) -> Dict[str, str]:
    return {
        "accept": "application/json",
        "authorization": f'Token token="{self.token}"',
    }

  @property
  def _bearer_headers(self) -> Dict[str, str]:
    return {"Authorization": f"Bearer {self.token}"}

  def _request(
      self,
      method: str,
      path: str,
      headers: Optional[Dict[str, str]] = None,
      params: Optional[Dict[str, Any]] = None,
      json_body: Optional[Any] = None,
  ) -> Any:
    """Sends one call to the API and returns the decoded JSON response."""
    url = f"{self.base_url}{path}"
    logging.info(f"{method} {url}")
    try:
      response = self.session.request(
          method,
          url,
          headers=headers,
          params=params,
          json=json_body,
          timeout=self.timeout,
      )
    except requests.RequestException as e:
      logging.error(f"❌ {method} {path} failed: {repr(e)}")
      raise PisanoApiError(f"{method} {path} failed: {e}") from e

    if not response.ok:
      logging.error(
          f"❌ {method} {path} returned {response.status_code}: {response.text}"
      )
      raise PisanoApiError(
          f"{method} {path} returned {response.status_code}",
          status_code=response.status_code,
      )
    if not response.content:
      return {}
    try:
      return response.json()
    except ValueError as e:
      raise PisanoApiError(
          f"{method} {path} returned a response that is not JSON.",
          status_code=response.status_code,
      ) from e

  def complete_login(self) -> Dict[str, Any]:
    """Validates the token and returns the account it belongs to.

    The account holds `account.id`, `account.name` and the `node.id` flows
    and campaigns are created under.
    """
    account = self._request(
        "POST", "/v1/complete_login", params={"token": self.token}
    )
    for field in ("account", "node"):
      entry = account.get(field) if isinstance(account, dict) else None
      if not isinstance(entry, dict) or entry.get("id") is None:
        logging.error(f"❌ Login response has no {field}.id.")
        raise PisanoApiError(f"Login response has no {field}.id.")
    logging.info(
        f"Logged in to account '{account['account'].get('name')}'."
    )
    return account

  def fetch_languages(self) -> List[Dict[str, Any]]:
    return self._request("GET", "/v1/languages", headers=self._token_headers)

  def fetch_language_catalog(self) -> Dict[str, int]:
    """Returns the language catalog as a language code to id mapping."""
    languages = self.fetch_languages()
    catalog = {
        language["code"]: language["id"]
        for language in languages
        if language.get("code") and language.get("id") is not None
    }
    logging.info(f"Fetched {len(catalog)} languages.")
    return catalog

  def create_flow(self, flow: Dict[str, Any], node_id: Any) -> Dict[str, Any]:
    """Creates a flow under a node and returns the created flow."""
    created = self._request(
        "POST",
        "/v1/flows",
        headers=self._bearer_headers,
        params={"node_id": node_id},
        json_body=flow,
    )
    logging.info(f"✅ Created flow {created.get('id')}.")
    return created

  def create_link_campaign(self, name: str, parent_id: Any) -> Dict[str, Any]:
    """Creates an active link campaign (a channel) under a node."""
    if not name or not name.strip():
      raise ValueError("A campaign name is required.")
    body = {
        **LINK_CAMPAIGN_DEFAULTS,
        "name": name,
        "parent_id": parent_id,
        "code": campaign_code(name),
    }
    created = self._request(
        "POST", "/v1/link_campaigns", headers=self._token_headers, json_body=body
    )
    logging.info(f"✅ Created link campaign {created.get('id')}.")
    return created

  def assign_flow(self, channel_id: Any, flow_id: Any) -> Dict[str, Any]:
    return self._request(
        "POST",
        f"/v1/nodes/{channel_id}/assign_flow",
        headers=self._token_headers,
        json_body={"id": channel_id, "flow_id": flow_id},
    )

  def web_feedback_url(self, channel_id: Any) -> str:
    """Returns the public survey url of a channel.

    The survey host is the API host with its `api.` prefix swapped for `web.`.
    """
    host = urllib.parse.urlparse(self.base_url).netloc
    if not host.startswith("api."):
      raise ValueError(
          f"Cannot derive the web feedback host from {self.base_url}."
      )
    return f"https://web.{host[len('api.'):]}/web_feedback?node_id={channel_id}"

  def flow_dashboard_url(self, flow_id: Any) -> str:
    return DASHBOARD_FLOW_URL.format(flow_id=flow_id)
