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
Reading Qualtrics survey files (QSF).

A QSF export is a JSON document with a `SurveyEntry` header and a flat list of
`SurveyElements`. Questions are the elements whose `Element` is "SQ"; their
`Payload` carries the question type, selector and type specific fields.
"""

import json
from typing import Any, Dict, List, Tuple, TypedDict

QUESTION_ELEMENT = 'SQ'
# Larger ids keep their file position among the non-integer ids.
MAX_INTEGER_ID = 2**32 - 1


class QsfFormatError(ValueError):
  """Raised when a document does not have the shape of a QSF export."""

  pass


class Choice(TypedDict, total=False):
  """A single entry of a question's `Choices` or `Answers` map."""

  Display: str
  TextEntry: str


class QuestionPayload(TypedDict, total=False):
  QuestionID: str
  QuestionType: str
  Selector: str
  QuestionText: str
  Choices: Dict[str, Choice]
  Answers: Dict[str, Choice]
  Validation: Dict[str, Any]


def load_qsf(filename: str) -> Dict[str, Any]:
  """Reads and validates a QSF file."""
  with open(filename, 'r', encoding='utf-8') as qsf_file:
    try:
      qsf = json.load(qsf_file)
    except json.JSONDecodeError as e:
      raise QsfFormatError(f'{filename} is not valid JSON: {e}') from e
  validate_qsf(qsf)
  return qsf


def validate_qsf(qsf: Any):
  """Checks the parts of the document the converters rely on."""
  if not isinstance(qsf, dict):
    raise QsfFormatError('QSF document must be a JSON object.')
  entry = qsf.get('SurveyEntry')
  if not isinstance(entry, dict):
    raise QsfFormatError('QSF document has no SurveyEntry.')
  if not entry.get('SurveyLanguage'):
    raise QsfFormatError('SurveyEntry has no SurveyLanguage.')
  elements = qsf.get('SurveyElements')
  if not isinstance(elements, list):
    raise QsfFormatError('QSF document has no SurveyElements list.')
  for index, element in enumerate(elements):
    if not isinstance(element, dict):
      raise QsfFormatError(f'SurveyElements[{index}] is not an object.')
    if element.get('Element') != QUESTION_ELEMENT:
      continue
    payload = element.get('Payload')
    if not isinstance(payload, dict):
      raise QsfFormatError(f'Question SurveyElements[{index}] has no Payload.')
    if not payload.get('QuestionID'):
      raise QsfFormatError(
          f'Question SurveyElements[{index}] has no QuestionID.'
      )


def survey_language(qsf: Dict[str, Any]) -> str:
  return qsf['SurveyEntry']['SurveyLanguage']


def survey_name(qsf: Dict[str, Any]) -> str:
  return qsf['SurveyEntry'].get('SurveyName', '')


def questions(qsf: Dict[str, Any]) -> List[QuestionPayload]:
  """Returns the payloads of all question elements in survey order."""
  return [
      element['Payload']
      for element in qsf['SurveyElements']
      if element.get('Element') == QUESTION_ELEMENT
  ]


def is_integer_id(entry_id: str) -> bool:
  """True for canonical non-negative integer ids such as '2', not '02'."""
  return (
      entry_id.isascii()
      and entry_id.isdigit()
      and str(int(entry_id)) == entry_id
      and int(entry_id) < MAX_INTEGER_ID
  )


def ordered_entries(
    payload: QuestionPayload, field: str
) -> List[Tuple[str, Choice]]:
  """Returns `Choices` or `Answers` as an ordered list of (id, entry) pairs.

  QSF stores these as JSON objects, occasionally as arrays. Object entries
  are ordered the way JavaScript orders object keys: integer ids ascending,
  then any other ids in file order. Arrays are numbered from 1.
  """
  entries = payload.get(field) or {}
  if isinstance(entries, list):
    return [(str(index + 1), entry) for index, entry in enumerate(entries)]
  if not isinstance(entries, dict):
    raise QsfFormatError(
        f"Question {payload.get('QuestionID')} has malformed {field}."
    )
  integer_ids = sorted(
      (entry_id for entry_id in entries if is_integer_id(entry_id)), key=int
  )
  other_ids = [entry_id for entry_id in entries if not is_integer_id(entry_id)]
  return [(entry_id, entries[entry_id]) for entry_id in integer_ids + other_ids]


def is_required(payload: QuestionPayload) -> bool:
  validation = payload.get('Validation') or {}
  settings = validation.get('Settings') or {}
  return settings.get('RequireAnswer') == 'ON'


def has_text_entry(choice: Choice) -> bool:
  text_entry = choice.get('TextEntry')
  if isinstance(text_entry, bool):
    return text_entry
  return text_entry in ('on', 'true')
