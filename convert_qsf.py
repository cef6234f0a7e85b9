#!/usr/bin/env python3
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
Convert a Qualtrics QSF export into a Pisano flow and publish it.

  convert_qsf.py --input_qsf survey.qsf --output_json flow.json
  convert_qsf.py --input_qsf survey.qsf --create_flow --campaign_name "Spring"

The token is read from --token or the PISANO_TOKEN environment variable.
"""

import argparse
import json
import logging
import sys

from pisano import publish
from pisano.client import ENVIRONMENTS
from pisano.client import PisanoApiError
from pisano.client import PisanoClient
from qualtrics import qsf as qsf_lib
from qualtrics.qsf_statistics import aggregate_statistics
from qualtrics.qsf_statistics import statistics_table
from qualtrics.qsf_to_flow import convert_qsf_to_flow


def convert_and_publish(args) -> dict:
  """Runs the login, conversion and publishing steps the arguments ask for."""
  qsf = qsf_lib.load_qsf(args.input_qsf)
  flow_name = args.flow_name or qsf_lib.survey_name(qsf)

  client = PisanoClient(token=args.token, environment=args.environment)
  account = client.complete_login()
  language_catalog = client.fetch_language_catalog()

  flow = convert_qsf_to_flow(
      qsf, language_catalog, flow_name, [account['account']['id']]
  )
  result = {'flow_name': flow_name, 'statistics': aggregate_statistics(qsf)}

  if args.output_json:
    with open(args.output_json, 'w', encoding='utf-8') as output_file:
      json.dump(flow, output_file, indent=2, ensure_ascii=False)
    logging.info(f'Wrote flow to {args.output_json}')

  if args.create_flow:
    node_id = account['node']['id']
    result['flow'] = publish.publish_flow(client, flow, node_id)
    if args.campaign_name:
      result['campaign'] = publish.publish_link_campaign(
          client, args.campaign_name, result['flow']['id'], node_id
      )
  elif args.campaign_name:
    logging.warning('--campaign_name needs --create_flow, no campaign created.')
  return result


def main():
  """Converts a QSF file and optionally creates the flow and a link campaign."""
  parser = argparse.ArgumentParser(
      description='Converts a Qualtrics QSF survey into a Pisano flow.'
  )
  parser.add_argument(
      '--input_qsf', required=True, help='Path to the input QSF file.'
  )
  parser.add_argument('--output_json', help='Write the converted flow here.')
  parser.add_argument(
      '--flow_name',
      help='Name of the flow. Defaults to the name of the survey.',
  )
  parser.add_argument('--token', help='Pisano API token.')
  parser.add_argument(
      '--environment',
      choices=sorted(ENVIRONMENTS),
      help='Pisano environment. Defaults to PISANO_ENVIRONMENT or "try".',
  )
  parser.add_argument(
      '--create_flow',
      action='store_true',
      help='Create the converted flow in Pisano.',
  )
  parser.add_argument(
      '--campaign_name',
      help='Create a link campaign serving the created flow.',
  )
  parser.add_argument(
      '--statistics',
      action='store_true',
      help='Print question statistics of the survey.',
  )
  args = parser.parse_args()
  logging.basicConfig(level=logging.INFO)

  try:
    result = convert_and_publish(args)
  except (PisanoApiError, ValueError) as e:
    logging.error(f'Conversion failed: {e}')
    sys.exit(1)

  if args.statistics:
    print(statistics_table(result['statistics']).to_string(index=False))
  print(json.dumps(
      {key: value for key, value in result.items() if key != 'statistics'},
      indent=2,
  ))


if __name__ == '__main__':
  main()
