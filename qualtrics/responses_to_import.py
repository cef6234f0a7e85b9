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
Reshapes a Qualtrics response export into a Pisano bulk import file.

Qualtrics exports put the question text and the import ids in the two rows
below the column header. Those rows are skipped, every remaining row becomes
one import row keyed by the flow's question keys.
"""

import argparse
from collections.abc import Iterable, Sequence
import json
import logging
from typing import Dict, List, Mapping

import pandas as pd

from qualtrics.qsf_to_flow import flow_question_keys

# Rows holding question text and import ids in a Qualtrics export.
HEADER_ROWS = 2

CONTEXT_FIELDS = ('node_id', 'flow_id', 'language')
CUSTOMER_FIELDS = (
    'customer_id',
    'customer_name',
    'customer_email',
    'customer_phone_number',
)


def update_column_mapping(
    column_mapping: Dict[str, str], column: str, question_key: str
) -> Dict[str, str]:
  """Maps a column to a question key, replacing any earlier assignment.

  An empty question key removes the column from the mapping.
  """
  updated = dict(column_mapping)
  if question_key:
    updated[column] = question_key
  else:
    updated.pop(column, None)
  return updated


def cell_import_id(cell: str) -> str:
  """Returns the ImportId of an export header cell, '' if it has none."""
  try:
    value = json.loads(cell)
  except (json.JSONDecodeError, TypeError):
    return ''
  if not isinstance(value, dict):
    return ''
  import_id = value.get('ImportId')
  return import_id if isinstance(import_id, str) else ''


def suggest_column_mapping(
    rows: Sequence[Mapping[str, str]], question_keys: Iterable[str]
) -> Dict[str, str]:
  """Maps response columns to the flow question keys they answer.

  The flow question keys are QuestionIDs. A Qualtrics export names its
  columns by data export tag (`Q1`) and carries the QuestionID in the
  ImportId row (`{"ImportId":"QID1"}`), with a `_TEXT` suffix for text
  entry answers. Columns without a matching ImportId are matched by name.
  Each question key is mapped from the first column that matches it.
  """
  keys = set(question_keys)
  if not rows:
    return {}
  import_id_row = rows[HEADER_ROWS - 1] if len(rows) >= HEADER_ROWS else {}
  mapping = {}
  for column in rows[0]:
    import_id = cell_import_id(import_id_row.get(column, ''))
    candidates = [import_id, import_id.removesuffix('_TEXT'), column]
    question_key = next(
        (candidate for candidate in candidates if candidate in keys), None
    )
    if question_key and question_key not in mapping.values():
      mapping[column] = question_key
  return mapping


def import_columns(column_mapping: Mapping[str, str]) -> List[str]:
  """Returns the import file columns: fixed fields, then mapped keys."""
  columns = list(CONTEXT_FIELDS + CUSTOMER_FIELDS)
  for question_key in column_mapping.values():
    if question_key and question_key not in columns:
      columns.append(question_key)
  return columns


def reshape_responses(
    rows: Sequence[Mapping[str, str]],
    column_mapping: Mapping[str, str],
    node_id: str,
    flow_id: str,
    language: str,
) -> List[Dict[str, str]]:
  """Builds import rows from response rows.

  Args:
    rows: Response rows keyed by column name, including the two header rows.
    column_mapping: Column name to flow question key.
    node_id: Id of the channel the responses are imported into.
    flow_id: Id of the flow the responses answer.
    language: Language code of the responses.

  Returns:
    One import row per data row. A mapped column missing from a row leaves
    its question key out of that import row.
  """
  import_rows = []
  for row in rows[HEADER_ROWS:]:
    import_row = {'node_id': node_id, 'flow_id': flow_id, 'language': language}
    import_row.update({field: '' for field in CUSTOMER_FIELDS})
    for column, question_key in column_mapping.items():
      if question_key and column in row:
        import_row[question_key] = row[column]
    import_rows.append(import_row)
  return import_rows


def read_responses(filename: str) -> List[Dict[str, str]]:
  responses = pd.read_csv(filename, dtype=str, keep_default_na=False)
  return responses.to_dict('records')


def write_import_file(
    import_rows: List[Dict[str, str]],
    column_mapping: Mapping[str, str],
    filename: str,
):
  import_file = pd.DataFrame(
      import_rows, columns=import_columns(column_mapping)
  )
  import_file.fillna('').to_csv(filename, index=False)


def main():
  """Writes a Pisano import CSV from a Qualtrics response export."""
  parser = argparse.ArgumentParser(
      description='Maps a Qualtrics response export onto Pisano flow keys.'
  )
  parser.add_argument(
      '--input_csv', required=True, help='Path to the Qualtrics export.'
  )
  parser.add_argument('--output_csv', required=True, help='Output filename.')
  parser.add_argument(
      '--mapping_json',
      help='JSON object of column name to question key.',
  )
  parser.add_argument(
      '--flow_json',
      help='Converted flow; columns answering its questions are mapped.',
  )
  parser.add_argument('--node_id', required=True, help='Channel id.')
  parser.add_argument('--flow_id', required=True, help='Flow id.')
  parser.add_argument('--language', default='EN', help='Response language.')
  args = parser.parse_args()
  logging.basicConfig(level=logging.INFO)

  rows = read_responses(args.input_csv)

  column_mapping: Dict[str, str] = {}
  if args.flow_json:
    with open(args.flow_json, 'r', encoding='utf-8') as flow_file:
      flow = json.load(flow_file)
    column_mapping = suggest_column_mapping(rows, flow_question_keys(flow))
  if args.mapping_json:
    with open(args.mapping_json, 'r', encoding='utf-8') as mapping_file:
      for column, question_key in json.load(mapping_file).items():
        column_mapping = update_column_mapping(
            column_mapping, column, question_key
        )
  if not column_mapping:
    raise ValueError('No response column is mapped to a question key.')

  import_rows = reshape_responses(
      rows, column_mapping, args.node_id, args.flow_id, args.language
  )
  write_import_file(import_rows, column_mapping, args.output_csv)
  logging.info(
      f'Wrote {len(import_rows)} import rows with'
      f' {len(column_mapping)} mapped columns to {args.output_csv}'
  )


if __name__ == '__main__':
  main()
