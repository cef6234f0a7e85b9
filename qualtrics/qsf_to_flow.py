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
Conversion utility to create a Pisano flow from a Qualtrics survey file (QSF).

Only text entry, single choice, NPS and Likert matrix questions are converted.
Every other question type is left out of the flow.
"""

import argparse
from collections import Counter
from collections.abc import Sequence
import copy
import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from qualtrics import qsf as qsf_lib
from qualtrics.localized_text import ENGLISH
from qualtrics.localized_text import NPS_HIGH_DESCRIPTION
from qualtrics.localized_text import NPS_LOW_DESCRIPTION
from qualtrics.localized_text import localized
from qualtrics.localized_text import submit_label

STATE_KEY = 'P1'

NPS_SCALE = range(11)

FLOW_DEFAULTS: Dict[str, Any] = {
    'transitions': [],
    'auto_translate': None,
    'prevent_customer_comment_email': False,
    'segment_ids': [],
    'parent_flow_id': None,
    'quota': None,
    'chat_rating_enabled': False,
    'quota_notify_emails': [''],
    'is_conversational': False,
    'prevent_multiple_feedback': False,
    'chat_rating_setting': {'active': False, 'body': {}},
    'spam_filter_on': False,
    'data_retention_settings': {},
    'prevent_upload': False,
}

QuestionBuilder = Callable[[qsf_lib.QuestionPayload, str], Dict[str, Any]]


def nps_weight(score: int) -> int:
  if score <= 6:
    return -1
  if score <= 8:
    return 0
  return 1


def resolve_language_ids(
    language: str, language_catalog: Mapping[str, int]
) -> Dict[str, Any]:
  """Looks up the flow language ids, leaving out codes the catalog lacks."""
  codes = [ENGLISH] if language == ENGLISH else [ENGLISH, language]
  language_ids = [
      language_catalog[code] for code in codes if code in language_catalog
  ]
  resolved = {'language_ids': language_ids}
  if language in language_catalog:
    resolved['default_language_id'] = language_catalog[language]
  else:
    logging.warning(f"Language '{language}' not found in language catalog.")
  if ENGLISH not in language_catalog:
    logging.warning(f"Language '{ENGLISH}' not found in language catalog.")
  return resolved


def _text_detail(payload: qsf_lib.QuestionPayload, language: str):
  return {
      'required': qsf_lib.is_required(payload),
      'extra': {'spam_filter_on': True},
      'style': 'text' if payload.get('Selector') == 'SL' else 'textarea',
      'body': localized(language, payload.get('QuestionText', '')),
      'key': payload['QuestionID'],
  }


def _radio_detail(payload: qsf_lib.QuestionPayload, language: str):
  # The display text doubles as option key, so choices sharing a display text
  # end up with the same key.
  options = [
      {
          'weight': 0,
          'body': localized(language, choice.get('Display', '')),
          'order': order,
          'key': choice.get('Display', ''),
          'text_entry': qsf_lib.has_text_entry(choice),
      }
      for order, (_, choice) in enumerate(
          qsf_lib.ordered_entries(payload, 'Choices')
      )
  ]
  return {
      'required': False,
      'style': 'radio',
      'extra': {'layout': 'horizontal'},
      'body': localized(language, payload.get('QuestionText', '')),
      'options': options,
      'key': payload['QuestionID'],
  }


def nps_options() -> List[Dict[str, Any]]:
  """Returns the fixed 0-10 options of a score question."""
  options = []
  for score in NPS_SCALE:
    option = {
        'weight': nps_weight(score),
        'body': localized(ENGLISH, str(score)),
        'defaultBody': str(score),
        'key': str(score),
        'order': score,
    }
    if score == NPS_SCALE[0]:
      option['description'] = dict(NPS_LOW_DESCRIPTION)
    elif score == NPS_SCALE[-1]:
      option['description'] = dict(NPS_HIGH_DESCRIPTION)
    options.append(option)
  return options


def _nps_detail(payload: qsf_lib.QuestionPayload, language: str):
  return {
      'required': False,
      'style': 'score',
      'weight': 1,
      'extra': {'has_static_options': True},
      'body': localized(language, payload.get('QuestionText', '')),
      'options': nps_options(),
      'key': payload['QuestionID'],
  }


def _matrix_detail(payload: qsf_lib.QuestionPayload, language: str):
  """Builds a Likert matrix: Answers become the scale, Choices the statements.

  Each statement embeds its own copy of the answer options. Those embedded
  options are keyed by the statement's display text, not the answer's.
  """
  answers = qsf_lib.ordered_entries(payload, 'Answers')
  choices = qsf_lib.ordered_entries(payload, 'Choices')
  scale = len(choices)

  options = [
      {
          'body': localized(language, answer.get('Display', '')),
          'key': answer.get('Display', ''),
          'order': order,
          'weight': 0,
      }
      for order, (_, answer) in enumerate(answers)
  ]
  statements = []
  for order, (_, choice) in enumerate(choices):
    display = choice.get('Display', '')
    statements.append({
        'body': localized(language, display),
        'key': display,
        'tag': f'tag-{order}',
        'order': order,
        'style': 'plain',
        'scale': scale,
        'options': [
            {
                'body': localized(language, answer.get('Display', '')),
                'key': display,
                'order': answer_order,
                'weight': 0,
            }
            for answer_order, (_, answer) in enumerate(answers)
        ],
    })

  return {
      'required': False,
      'style': 'matrix',
      'extra': {
          'layout': 'horizontal',
          'spam_filter_on': True,
          'matrix_answer_type': 'single',
          'matrix_question_type': 'positivity',
      },
      'body': localized(language, payload.get('QuestionText', '')),
      'options': options,
      'statements': statements,
      'key': payload['QuestionID'],
      'scale': scale,
  }


QUESTION_BUILDERS: Dict[tuple, QuestionBuilder] = {
    ('TE', 'SL'): _text_detail,
    ('TE', 'ML'): _text_detail,
    ('TE', 'ESTB'): _text_detail,
    ('MC', 'SAHR'): _radio_detail,
    ('MC', 'SACOL'): _radio_detail,
    ('MC', 'NPS'): _nps_detail,
    ('Matrix', 'Likert'): _matrix_detail,
}


def element_key(position: int) -> str:
  return f'{STATE_KEY}E{position}'


def convert_question(
    payload: qsf_lib.QuestionPayload, language: str
) -> Optional[Dict[str, Any]]:
  """Returns the flow element detail for a question, None if unsupported."""
  builder = QUESTION_BUILDERS.get(
      (payload.get('QuestionType'), payload.get('Selector'))
  )
  if builder is None:
    return None
  return builder(payload, language)


def convert_qsf_to_flow(
    qsf: Dict[str, Any],
    language_catalog: Mapping[str, int],
    flow_name: str,
    parent_node_ids: Sequence[Any] = (),
) -> Dict[str, Any]:
  """Converts a parsed QSF document into a Pisano flow document.

  Args:
    qsf: The parsed QSF document. It is not modified.
    language_catalog: Language code to Pisano language id.
    flow_name: Name of the created flow.
    parent_node_ids: Ids of the nodes owning the flow.

  Returns:
    The flow document, ready to be posted to the flows endpoint.
  """
  if not flow_name or not flow_name.strip():
    raise ValueError('A flow name is required to convert a survey.')
  qsf_lib.validate_qsf(qsf)
  language = qsf_lib.survey_language(qsf)

  elements = []
  skipped = 0
  for payload in qsf_lib.questions(qsf):
    detail = convert_question(payload, language)
    if detail is None:
      skipped += 1
      continue
    elements.append({
        'type': 'question',
        'visible': True,
        'detail': detail,
        'key': element_key(len(elements) + 1),
        'triggers': None,
    })
  elements.append({
      'type': 'submit',
      'visible': True,
      'body': submit_label(language),
      'key': element_key(len(elements) + 1),
      'detail': None,
      'triggers': None,
  })
  logging.info(
      f"Converted {len(elements) - 1} questions for flow '{flow_name}',"
      f' skipped {skipped} unsupported questions.'
  )

  flow = {
      'states': [{
          'style': 'plain',
          'elements': elements,
          'key': STATE_KEY,
          'initial': True,
      }],
      **copy.deepcopy(FLOW_DEFAULTS),
      'name': flow_name,
      'parent_node_ids': list(parent_node_ids),
  }
  flow.update(resolve_language_ids(language, language_catalog))
  return flow


def question_elements(flow: Dict[str, Any]) -> List[Dict[str, Any]]:
  return [
      element
      for state in flow['states']
      for element in state['elements']
      if element['type'] == 'question'
  ]


def flow_question_keys(flow: Dict[str, Any]) -> List[str]:
  """Returns the question keys of a flow in element order."""
  return [element['detail']['key'] for element in question_elements(flow)]


def count_question_styles(flow: Dict[str, Any]) -> Dict[str, int]:
  return dict(
      Counter(element['detail']['style'] for element in question_elements(flow))
  )


def load_language_catalog(filename: str) -> Dict[str, int]:
  """Reads a language catalog saved as a code to id object or an API list."""
  with open(filename, 'r', encoding='utf-8') as catalog_file:
    languages = json.load(catalog_file)
  if isinstance(languages, dict):
    return languages
  return {language['code']: language['id'] for language in languages}


def main():
  """Converts a QSF export into a Pisano flow JSON file."""
  parser = argparse.ArgumentParser(
      description='Converts a Qualtrics QSF survey into a Pisano flow.'
  )
  parser.add_argument(
      '--input_qsf', required=True, help='Path to the input QSF file.'
  )
  parser.add_argument('--output_json', required=True, help='Output filename.')
  parser.add_argument(
      '--flow_name',
      help='Name of the flow. Defaults to the name of the survey.',
  )
  parser.add_argument(
      '--languages_json',
      help='Language catalog exported from the Pisano languages endpoint.',
  )
  parser.add_argument(
      '--node_id', action='append', default=[], help='Owning node id.'
  )
  args = parser.parse_args()
  logging.basicConfig(level=logging.INFO)

  qsf = qsf_lib.load_qsf(args.input_qsf)
  language_catalog = (
      load_language_catalog(args.languages_json) if args.languages_json else {}
  )
  flow = convert_qsf_to_flow(
      qsf,
      language_catalog,
      args.flow_name or qsf_lib.survey_name(qsf),
      args.node_id,
  )
  with open(args.output_json, 'w', encoding='utf-8') as output_file:
    json.dump(flow, output_file, indent=2, ensure_ascii=False)


if __name__ == '__main__':
  main()
