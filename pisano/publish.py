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
Publishing converted flows.

Each step depends on the result of the previous one, so the steps run one
after another and the first failing call ends the chain with a
PisanoApiError. Nothing is retried.
"""

import logging
from typing import Any, Dict, TypedDict

from pisano.client import PisanoApiError
from pisano.client import PisanoClient
from qualtrics.qsf_to_flow import count_question_styles


class PublishedFlow(TypedDict):
  id: Any
  stats: Dict[str, int]
  url: str


class PublishedCampaign(TypedDict):
  id: Any
  flow_id: Any
  url: str


def publish_flow(
    client: PisanoClient, flow: Dict[str, Any], node_id: Any
) -> PublishedFlow:
  """Creates the flow and returns its id with per style question counts.

  The flow document itself is left untouched, the created id is only part of
  the returned result.
  """
  created = client.create_flow(flow, node_id)
  flow_id = created.get("id")
  if flow_id is None:
    raise PisanoApiError("Flow creation response has no id.")
  stats = count_question_styles(flow)
  for style, count in stats.items():
    logging.info(f"   {style}: {count}")
  return {
      "id": flow_id,
      "stats": stats,
      "url": client.flow_dashboard_url(flow_id),
  }


def publish_link_campaign(
    client: PisanoClient, name: str, flow_id: Any, node_id: Any
) -> PublishedCampaign:
  """Creates a link campaign under a node and assigns the flow to it."""
  campaign = client.create_link_campaign(name, node_id)
  channel_id = campaign.get("id")
  if channel_id is None:
    raise PisanoApiError("Link campaign creation response has no id.")
  try:
    client.assign_flow(channel_id, flow_id)
  except PisanoApiError:
    logging.error(
        f"Campaign {channel_id} was created but flow {flow_id} could not be"
        " assigned to it."
    )
    raise
  return {
      "id": channel_id,
      "flow_id": flow_id,
      "url": client.web_feedback_url(channel_id),
  }
